import unittest

from services.errors import InvalidTransitionError
from utils.status_machine import is_allowed_transition, is_terminal, transition


class StatusMachineUnitTests(unittest.TestCase):
    def test_happy_path(self):
        state = "idle"
        for target in ("uploading", "processing", "done", "idle"):
            state = transition(state, target, context="test")
        self.assertEqual(state, "idle")

    def test_error_path_and_reset(self):
        self.assertTrue(is_allowed_transition("processing", "error"))
        self.assertTrue(is_allowed_transition("error", "idle"))

    def test_blocked_transitions(self):
        self.assertFalse(is_allowed_transition("idle", "done"))
        self.assertFalse(is_allowed_transition("done", "processing"))
        self.assertFalse(is_allowed_transition("processing", "idle"))
        with self.assertRaises(InvalidTransitionError) as ctx:
            transition("uploading", "idle", context="test")
        self.assertEqual(ctx.exception.current, "uploading")
        self.assertEqual(ctx.exception.target, "idle")

    def test_normalizes_case(self):
        self.assertEqual(transition(" IDLE ", "Uploading", context="test"), "uploading")

    def test_terminal_states(self):
        self.assertTrue(is_terminal("done"))
        self.assertTrue(is_terminal("error"))
        self.assertFalse(is_terminal("processing"))


if __name__ == "__main__":
    unittest.main()
