from docshop.exceptions import (
    AssemblyError,
    CodecError,
    DocShopError,
    SettingsError,
    ValidationError,
)


def test_root_exception_hierarchy() -> None:
    for exc_type in (AssemblyError, CodecError, SettingsError, ValidationError):
        assert issubclass(exc_type, DocShopError)


def test_exception_messages() -> None:
    assert str(ValidationError(message="bad page")) == "bad page"
    assert str(SettingsError()) == "Failed to load settings"
    assert str(SettingsError(exc=ValueError("x"))) == "Failed to load settings: x"
