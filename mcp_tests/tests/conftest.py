import pytest


class DummyMCP:
    """Minimal FastMCP stand-in to capture tool registration."""

    def __init__(self) -> None:
        self.tools = {}

    def tool(self, *, name: str):
        def _decorator(fn):
            self.tools[name] = fn
            return fn
        return _decorator


class FakeGraphQLClient:
    """Records (document, variables) calls and replays canned responses.

    `responses` is either a list consumed in order (an Exception item is
    raised instead of returned) or a callable taking (document, variables).
    """

    def __init__(self, responses=None) -> None:
        self._responses = responses if responses is not None else []
        self.calls = []

    async def query(self, document, variables=None):
        self.calls.append((document, variables))

        if callable(self._responses):
            out = self._responses(document, variables)
        else:
            if not self._responses:
                raise AssertionError("unexpected GraphQL call")
            out = self._responses.pop(0)

        if isinstance(out, Exception):
            raise out
        return out


@pytest.fixture
def dummy_mcp():
    return DummyMCP()


@pytest.fixture
def fake_client():
    def _make(responses=None):
        return FakeGraphQLClient(responses)
    return _make
