import unittest

from ctxbind import Container


class TestLifetimeControl(unittest.TestCase):
    cont: Container

    def setUp(self):
        self.cont = Container()

    def test_get_factory_binding_returns_same_instance(self):
        class A: ...

        self.cont.register(A, factory=A)
        a1 = self.cont.get(A)
        a2 = self.cont.get(A)
        assert a2 is a1, "get should return the cached instance"

    def test_create_factory_binding_returns_new_instances(self):
        class A: ...

        self.cont.register(A, factory=A)
        a1 = self.cont.create(A)
        a2 = self.cont.create(A)
        assert a2 is not a1, "create should return new instances"

    def test_register_instance_is_returned_by_create_and_get(self):
        class A: ...

        inst = A()
        self.cont.register_instance(A, inst)
        assert self.cont.get(A) is inst
        assert self.cont.create(A) is inst

    def test_get_constructs_once_across_name_and_type_tokens(self):
        calls = []

        class A:
            def __init__(self):
                calls.append(self)

        self.cont.register(A, names=["a"])
        assert self.cont.get("a") is self.cont.get(A)
        assert len(calls) == 1

    def test_failed_construction_is_retried_on_next_get(self):
        attempts = []

        class Flaky:
            def __init__(self):
                attempts.append(1)
                if len(attempts) == 1:
                    msg = "first attempt fails"
                    raise ConnectionError(msg)

        with self.assertRaises(RuntimeError):
            self.cont.get(Flaky)
        assert not self.cont.is_cached(Flaky)

        first = self.cont.get(Flaky)
        assert self.cont.get(Flaky) is first
        assert len(attempts) == 2
