import threading

import pytest

from checkhub.hub import Checker, Hub, RegistrationError, get_hub, register, reset_hub
from checkhub.hub import registry as registry_module


class _Stub(Checker):
    def __init__(self, name: str, tag: str = ""):
        self.name = name
        self.tag = tag

    def load(self, directory, fmt, subdir_rewrites):
        pass

    def check(self):
        pass


@pytest.fixture(autouse=True)
def _fresh_hub():
    reset_hub()
    yield
    reset_hub()


def test_register_same_name_last_write_wins():
    hub = Hub()
    first = _Stub("item", "first")
    second = _Stub("item", "second")

    hub.register(first)
    hub.register(second)

    assert len(hub) == 1
    assert hub.get("item") is second


def test_register_same_name_reverse_order():
    hub = Hub()
    hub.register(_Stub("item", "second"))
    hub.register(_Stub("item", "first"))

    assert hub.names() == ["item"]
    assert hub.get("item").tag == "first"


def test_register_logs_warning_on_overwrite(caplog):
    hub = Hub()
    hub.register(_Stub("item"))
    with caplog.at_level("WARNING"):
        hub.register(_Stub("item"))
    assert "Overwriting checker 'item'" in caplog.text


def test_register_rejects_invalid_checkers():
    hub = Hub()
    with pytest.raises(RegistrationError):
        hub.register(None)
    with pytest.raises(RegistrationError):
        hub.register(object())
    with pytest.raises(RegistrationError):
        hub.register(_Stub(""))
    assert len(hub) == 0


def test_register_class_as_decorator():
    hub = Hub()

    @hub.register
    class HeroChecker(Checker):
        name = "hero"
        description = "heroes"

        def load(self, directory, fmt, subdir_rewrites):
            pass

        def check(self):
            pass

    assert isinstance(HeroChecker, type)
    assert isinstance(hub.get("hero"), HeroChecker)
    assert hub.info()[0]["description"] == "heroes"


def test_register_rejects_non_checker_class():
    hub = Hub()
    with pytest.raises(RegistrationError):
        hub.register(dict)


def test_override_requires_existing_name():
    hub = Hub()
    with pytest.raises(RegistrationError):
        hub.override(_Stub("item"))

    hub.register(_Stub("item", "real"))
    mock = _Stub("item", "mock")
    hub.override(mock)
    assert hub.get("item") is mock


def test_unregister():
    hub = Hub()
    checker = _Stub("item")
    hub.register(checker)
    assert hub.unregister("item") is checker
    assert "item" not in hub
    assert hub.unregister("item") is None


def test_select_with_and_without_filter():
    hub = Hub()
    for name in ("a", "b", "c"):
        hub.register(_Stub(name))

    assert list(hub.select()) == ["a", "b", "c"]
    assert list(hub.select(lambda name: name != "b")) == ["a", "c"]


def test_select_uses_messager_variant():
    variant = _Stub("item", "variant")

    class _Wrapper(_Stub):
        def messager(self):
            return variant

    hub = Hub()
    hub.register(_Wrapper("item"))
    assert hub.select()["item"] is variant


def test_get_hub_is_singleton():
    assert get_hub() is get_hub()


def test_get_hub_concurrent_first_access(monkeypatch):
    constructed = []
    original_init = Hub.__init__

    def counting_init(self):
        constructed.append(self)
        original_init(self)

    monkeypatch.setattr(Hub, "__init__", counting_init)

    barrier = threading.Barrier(16)
    seen = []

    def worker():
        barrier.wait()
        seen.append(get_hub())

    threads = [threading.Thread(target=worker) for _ in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(constructed) == 1
    assert len(seen) == 16
    assert all(h is seen[0] for h in seen)
    assert registry_module._hub is seen[0]


def test_module_level_register_uses_singleton():
    checker = _Stub("item")
    register(checker)
    assert get_hub().get("item") is checker
