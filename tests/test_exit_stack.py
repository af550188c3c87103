import unittest

from scopepy import ExitStack, ContextManagerBase, ConsoleLogger, with_context
from scopepy.exit_stack import PlainCallback, BoundExit


class Recorder(ContextManagerBase):
    def __init__(self, name: str, log: list, suppress: bool = False):
        self.name = name; self.log = log; self.suppress = suppress

    def enter(self):
        self.log.append(("enter", self.name))
        return self.name

    def exit(self, *error):
        self.log.append(("exit", self.name, error))
        return self.suppress


class TestExitStackOrder(unittest.TestCase):
    def test_callbacks_run_lifo_once_without_arguments(self):
        calls: list = []
        s = ExitStack()
        for i in range(5):
            s.callback(lambda *err, i=i: calls.append((i, err)))
        self.assertEqual(len(s), 5)
        self.assertFalse(s.exit())
        self.assertEqual(calls, [(4, ()), (3, ()), (2, ()), (1, ()), (0, ())])
        self.assertEqual(len(s), 0)
        # Already consumed
        self.assertFalse(s.exit())
        self.assertEqual(len(calls), 5)

    def test_mixed_push_and_callback_order(self):
        log: list = []
        s = ExitStack()
        a = Recorder("a", log)
        s.push(a)
        s.callback(lambda *err: log.append(("cb",)))
        self.assertEqual(s.enter_context(Recorder("b", log)), "b")
        s.exit()
        self.assertEqual(log, [("enter", "b"), ("exit", "b", ()), ("cb",), ("exit", "a", ())])

    def test_push_does_not_enter(self):
        log: list = []
        s = ExitStack()
        s.push(Recorder("a", log))
        self.assertEqual(log, [])
        s.close()
        self.assertEqual(log, [("exit", "a", ())])

    def test_enter_failure_registers_nothing(self):
        class Bad(ContextManagerBase):
            def enter(self): raise OSError("nope")
        s = ExitStack()
        with self.assertRaises(OSError):
            s.enter_context(Bad())
        self.assertEqual(len(s), 0)

    def test_callback_and_push_return_argument(self):
        s = ExitStack()

        @s.callback
        def done(*err):
            return None

        cm = Recorder("a", [])
        self.assertIs(s.push(cm), cm)
        self.assertTrue(callable(done))
        self.assertEqual(len(s), 2)

    def test_actions_are_tagged(self):
        s = ExitStack()
        s.callback(print)
        s.push(Recorder("a", []))
        self.assertIsInstance(s._exit_actions[0], PlainCallback)
        self.assertIsInstance(s._exit_actions[1], BoundExit)


class TestExitStackErrors(unittest.TestCase):
    def test_unsuppressed_incoming_error_reports_false(self):
        seen: list = []
        err = ValueError("body")
        s = ExitStack()
        s.callback(lambda *e: seen.append(e))
        s.callback(lambda *e: seen.append(e))
        self.assertFalse(s.exit(err))
        self.assertEqual(seen, [(err,), (err,)])

    def test_unsuppressed_body_error_propagates_through_with_context(self):
        seen: list = []
        err = ValueError("body")

        def body(stack: ExitStack):
            stack.callback(lambda *e: seen.append(e))
            stack.callback(lambda *e: None)
            raise err

        with self.assertRaises(ValueError) as cm:
            with_context(ExitStack(), body)
        self.assertIs(cm.exception, err)
        self.assertEqual(seen, [(err,)])

    def test_unsuppressed_body_error_propagates_through_with_statement(self):
        err = KeyError("k")
        with self.assertRaises(KeyError) as cm:
            with ExitStack() as s:
                s.callback(lambda *e: None)
                raise err
        self.assertIs(cm.exception, err)

    def test_suppression_is_sticky_forward(self):
        seen: list = []
        err = ValueError("body")
        s = ExitStack()
        s.callback(lambda *e: seen.append(("first", e)))
        s.callback(lambda *e: True)
        s.callback(lambda *e: seen.append(("last", e)))
        self.assertTrue(s.exit(err))
        self.assertEqual(seen, [("last", (err,)), ("first", ())])

    def test_only_literal_true_suppresses(self):
        s = ExitStack()
        s.callback(lambda *e: 1)
        self.assertFalse(s.exit(KeyError("k")))

    def test_clean_exit_reports_false_even_if_action_returns_true(self):
        s = ExitStack()
        s.callback(lambda *e: True)
        self.assertFalse(s.exit())

    def test_failure_runs_remaining_and_first_failure_wins(self):
        count = {"n": 0}
        first = RuntimeError("first")
        second = RuntimeError("second")

        def bump(*e):
            count["n"] += 1

        def raise_second(*e):
            raise second

        def raise_first(*e):
            raise first

        s = ExitStack(logger=ConsoleLogger(level="ERROR"))
        s.callback(bump)
        s.callback(raise_second)
        s.callback(bump)
        s.callback(raise_first)
        with self.assertRaises(RuntimeError) as cm:
            s.exit()
        self.assertIs(cm.exception, first)
        self.assertEqual(count["n"], 2)

    def test_actions_after_failure_receive_the_failure(self):
        seen: list = []
        boom = OSError("boom")
        s = ExitStack()
        s.callback(lambda *e: seen.append(e))

        def fail(*e):
            raise boom

        s.callback(fail)
        with self.assertRaises(OSError):
            s.exit()
        self.assertEqual(seen, [(boom,)])

    def test_failure_can_be_suppressed_by_later_action(self):
        boom = OSError("boom")
        s = ExitStack()
        s.callback(lambda *e: True)

        def fail(*e):
            raise boom

        s.callback(fail)
        # No incoming error, so the flag stays False
        self.assertFalse(s.exit())

    def test_incoming_error_kept_over_cleanup_failure(self):
        body = ValueError("body")
        s = ExitStack(logger=ConsoleLogger(level="ERROR"))

        def fail(*e):
            raise OSError("cleanup")

        s.callback(fail)
        with self.assertRaises(ValueError) as cm:
            s.exit(body)
        self.assertIs(cm.exception, body)

    def test_failure_after_suppression_is_raised(self):
        body = ValueError("body")
        late = OSError("late")
        seen: list = []
        s = ExitStack()
        s.callback(lambda *e: seen.append(e))

        def fail(*e):
            raise late

        s.callback(fail)
        s.callback(lambda *e: True)
        with self.assertRaises(OSError) as cm:
            s.exit(body)
        self.assertIs(cm.exception, late)
        self.assertEqual(seen, [(late,)])

    def test_bound_exit_receives_error(self):
        log: list = []
        err = KeyError("x")
        s = ExitStack()
        s.enter_context(Recorder("a", log, suppress=True))
        self.assertTrue(s.exit(err))
        self.assertEqual(log[-1], ("exit", "a", (err,)))


class TestExitStackPopAll(unittest.TestCase):
    def test_pop_all_transfers_ownership(self):
        order: list = []
        s = ExitStack()
        s.callback(lambda *e: order.append(1))
        s.callback(lambda *e: order.append(2))
        moved = s.pop_all()
        self.assertEqual(len(s), 0)
        self.assertEqual(len(moved), 2)
        s.exit()
        self.assertEqual(order, [])
        moved.close()
        self.assertEqual(order, [2, 1])

    def test_pop_all_keeps_resources_past_block(self):
        log: list = []

        def open_both(stack: ExitStack):
            stack.enter_context(Recorder("a", log))
            stack.enter_context(Recorder("b", log))
            return stack.pop_all()

        res = with_context(ExitStack(), open_both)
        self.assertFalse(any(e[0] == "exit" for e in log))
        res.result.close()
        self.assertEqual([e[:2] for e in log if e[0] == "exit"], [("exit", "b"), ("exit", "a")])

    def test_stacks_do_not_share_action_list(self):
        s = ExitStack()
        s.callback(lambda *e: None)
        moved = s.pop_all()
        s.callback(lambda *e: None)
        self.assertEqual(len(moved), 1)
        self.assertEqual(len(s), 1)

    def test_pop_all_on_subclass_with_required_arguments(self):
        order: list = []

        class NamedStack(ExitStack):
            def __init__(self, name: str):
                super().__init__()
                self.name = name

        s = NamedStack("db")
        s.callback(lambda *e: order.append(1))
        moved = s.pop_all()
        self.assertIsInstance(moved, ExitStack)
        self.assertEqual(len(s), 0)
        moved.close()
        self.assertEqual(order, [1])


class TestExitStackNesting(unittest.TestCase):
    def test_enter_returns_self(self):
        s = ExitStack()
        self.assertIs(s.enter(), s)

    def test_nested_stack_suppresses_for_outer(self):
        outer = ExitStack()
        inner = outer.enter_context(ExitStack())
        inner.callback(lambda *e: True)
        self.assertTrue(outer.exit(ValueError("x")))

    def test_with_statement(self):
        order: list = []
        with ExitStack() as s:
            s.callback(lambda *e: order.append("a"))
            s.callback(lambda *e: order.append("b"))
        self.assertEqual(order, ["b", "a"])

    def test_with_statement_suppresses(self):
        with ExitStack() as s:
            s.callback(lambda *e: True)
            raise ValueError("swallowed")

    def test_enter_native(self):
        import contextlib
        events: list = []

        @contextlib.contextmanager
        def native():
            events.append("in")
            yield 5
            events.append("out")

        with ExitStack() as s:
            self.assertEqual(s.enter_native(native()), 5)
        self.assertEqual(events, ["in", "out"])


if __name__ == "__main__":
    unittest.main()
