import pytest

from zstache import StaticProvider

from tests.infrastructure import RecordingProvider


@pytest.fixture
def partials() -> StaticProvider:
    """Набор частичных шаблонов для тестов включения."""
    return StaticProvider({
        "greeting": "Hello {{name}}!",
        "item": "<li>{{.}}</li>\n",
        "lines": "first\n\nsecond\n",
        "user": "{{#user}}{{name}} <{{email}}>{{/user}}",
    })


@pytest.fixture
def recording_provider() -> RecordingProvider:
    return RecordingProvider({"p": "[{{value}}]"})
