"""Smoke test for application startup."""


def test_app_imports() -> None:
    """Verify the app can be imported without errors."""
    from commandforge.main import app

    assert app.title == "commandforge"
    assert "/cards/resolve" in app.openapi()["paths"]
