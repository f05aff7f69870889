import pytest

from operation_module import clear_cache


@pytest.fixture(autouse=True)
def fresh_search_cache():
    clear_cache()
    yield
    clear_cache()
