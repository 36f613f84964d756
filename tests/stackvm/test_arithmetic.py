"""Tests for arithmetic instructions and machine integer behaviour."""

import pytest

from stackvm import StackVMRuntimeError

class TestArithmetic:
    """Test add, sub, mul, div, mod, abs and neg."""

    @pytest.mark.parametrize("a,b,op,expected", [
        (5, 3, "add", 8),
        (-5, 3, "add", -2),
        (7, 2, "sub", 5),
        (2, 7, "sub", -5),
        (6, 7, "mul", 42),
        (-6, 7, "mul", -42),
        (7, 2, "div", 3),
        (7, 7, "div", 1),
        (0, 5, "div", 0),
        (7, 2, "mod", 1),
        (6, 3, "mod", 0),
    ])
    def test_binary_operations(self, vm, helpers, a, b, op, expected):
        """The first pushed value is the left operand."""
        result = vm.run(helpers.program(f"push {a}", f"push {b}", op))

        assert result.stack == [expected]

    @pytest.mark.parametrize("a,b,op,expected", [
        (-7, 2, "div", -3),
        (7, -2, "div", -3),
        (-7, -2, "div", 3),
        (-7, 2, "mod", -1),
        (7, -2, "mod", 1),
        (-7, -2, "mod", -1),
    ])
    def test_division_truncates_toward_zero(self, vm, helpers, a, b, op, expected):
        """Quotients round toward zero and remainders follow the dividend's sign."""
        result = vm.run(helpers.program(f"push {a}", f"push {b}", op))

        assert result.stack == [expected]

    def test_binary_ops_keep_values_below(self, vm, helpers):
        result = vm.run(helpers.program("push 100", "push 2", "push 3", "mul"))

        assert result.stack == [100, 6]

    @pytest.mark.parametrize("a,b,op,expected", [
        (2147483647, 1, "add", -2147483648),
        (-2147483648, 1, "sub", 2147483647),
        (65536, 65536, "mul", 0),
    ])
    def test_overflow_wraps(self, vm, helpers, a, b, op, expected):
        result = vm.run(helpers.program(f"push {a}", f"push {b}", op))

        assert result.stack == [expected]

    @pytest.mark.parametrize("op", ["div", "mod"])
    def test_minimum_divided_by_minus_one_is_fatal(self, vm, stdout, helpers, op):
        """The quotient of the smallest value and -1 has no machine representation."""
        with pytest.raises(StackVMRuntimeError, match="Division overflow"):
            vm.run(helpers.program("push -2147483648", "push -1", op, "out"))

        assert stdout.getvalue() == ""

    @pytest.mark.parametrize("value,expected", [(-5, 5), (5, 5), (0, 0)])
    def test_abs(self, vm, helpers, value, expected):
        assert vm.run(helpers.program(f"push {value}", "abs")).stack == [expected]

    def test_abs_of_minimum_is_fatal(self, vm, helpers):
        with pytest.raises(StackVMRuntimeError, match="Absolute value overflow"):
            vm.run(helpers.program("push -2147483648", "abs"))

    @pytest.mark.parametrize("value,expected", [(5, -5), (-5, 5), (0, 0), (-2147483648, -2147483648)])
    def test_neg(self, vm, helpers, value, expected):
        assert vm.run(helpers.program(f"push {value}", "neg")).stack == [expected]

    def test_size_feeds_arithmetic(self, vm, helpers):
        result = vm.run(helpers.program("push 10", "push 10", "size", "mul"))

        assert result.stack == [10, 20]
