"""Tests for the service container."""

import pytest

from dynapi import ServiceContainer


class IGreeter:
    pass


class Greeter(IGreeter):
    instances = 0

    def __init__(self):
        Greeter.instances += 1


@pytest.fixture(autouse=True)
def reset_counter():
    Greeter.instances = 0


def test_singleton_is_created_lazily_once(container):
    container.register(IGreeter, Greeter)
    assert Greeter.instances == 0

    first = container.resolve(IGreeter)
    second = container.resolve(IGreeter)

    assert first is second
    assert isinstance(first, Greeter)
    assert Greeter.instances == 1


def test_transient_registration_creates_new_instances(container):
    container.register(IGreeter, Greeter, singleton=False)
    assert container.resolve(IGreeter) is not container.resolve(IGreeter)


def test_register_instance(container):
    greeter = Greeter()
    container.register_instance(IGreeter, greeter)
    assert container.resolve(IGreeter) is greeter


def test_unregistered_contract_raises_lookup_error(container):
    with pytest.raises(LookupError, match="IGreeter"):
        container.resolve(IGreeter)


def test_factory_must_be_callable(container):
    with pytest.raises(TypeError):
        container.register(IGreeter, "not callable")


def test_reset(container):
    container.register(IGreeter, Greeter)
    assert container.is_registered(IGreeter)

    container.reset()

    assert not container.is_registered(IGreeter)
