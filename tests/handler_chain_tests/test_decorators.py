import pytest
from handler_chain.decorators import handler
from handler_chain.dispatch import FunctionHandler, HandlerChain


@pytest.mark.unit
def test_decorator_builds_named_function_handler():
    @handler(lambda r: r == "ping")
    def pong(request):
        return "pong"

    assert isinstance(pong, FunctionHandler) and pong.name == "pong"
    assert HandlerChain([pong]).dispatch("ping").result == "pong"


@pytest.mark.unit
def test_decorator_name_override():
    @handler(lambda r: True, name="catch-all")
    def fallback(request):
        return request

    out = HandlerChain([fallback]).dispatch(7)
    assert out.handler_name == "catch-all" and out.result == 7
