"""
Unit Tests for the basket variants.

Test Coverage:
- ModuleBasket: matching by code, double counting
- MultiModuleBasket: filters, greedy credit selection
- ArrayBasket: AND / OR / at-least-N, early termination, partial progress
- FulfillmentResultBasket: predicate gating
- StatefulBasket: cross-branch double-count prevention
- Event propagation and accumulated state
"""

import pytest

from degree_audit.engines import (
    ArrayBasket,
    ComparisonOp,
    FulfillmentResultBasket,
    ModuleBasket,
    MultiModuleBasket,
    StatefulBasket,
    factory,
    provenance,
)
from degree_audit.exceptions import BasketConstructionError
from degree_audit.models import BasketState, CourseRecord, PlanView


def leaf(code, credits=4):
    return factory.module(code, credits)


class TestModuleBasket:
    """Tests for single-course requirements."""

    def test_evaluate_when_course_in_view_then_satisfied_with_credits(self, view_of):
        view = view_of(("CS2103T", 4))
        result = leaf("CS2103T").evaluate(view)
        assert result.satisfied is True
        assert result.matched_credits == 4
        assert result.matched_codes == ["CS2103T"]

    def test_evaluate_when_course_missing_then_unsatisfied_without_side_effects(self, view_of):
        view = view_of(("CS2103T", 4))
        basket = leaf("CS2040")
        result = basket.evaluate(view)
        assert result.satisfied is False
        assert result.matched_credits == 0
        assert result.matched_modules == set()
        assert view.courses()[0].matched_baskets == []

    def test_evaluate_when_plan_credits_differ_then_uses_plan_record(self, view_of):
        view = view_of(("CS3216", 5))
        assert leaf("CS3216", 4).evaluate(view).matched_credits == 5

    def test_init_when_not_a_course_then_raises_error(self):
        with pytest.raises(BasketConstructionError):
            ModuleBasket("CS2103T")  # type: ignore

    def test_double_count_when_course_absent_then_satisfied_and_event_sent(self):
        basket = leaf("CS2103T")
        parent = factory.any_of("Software Engineering", [basket])

        basket.double_count()

        assert basket.criterion_state.satisfied is True
        assert basket.course.matched_baskets == [basket, parent]
        assert basket.course in parent.criterion_state.matched_modules

    def test_double_count_when_ancestor_receives_then_not_force_satisfied(self):
        basket = leaf("CS2103T")
        parent = factory.all_of("Core", [basket, leaf("CS2101")])
        basket.double_count()
        assert parent.criterion_state.satisfied is False

    def test_double_count_when_view_given_then_plan_record_carries_provenance(self, view_of):
        view = view_of(("CS2103T", 4), ("MA1521", 4))
        basket = leaf("CS2103T")
        factory.any_of("Software Engineering", [basket])

        basket.double_count(view.with_courses([]))

        assert provenance(view.courses())["CS2103T"] == ["CS2103T", "Software Engineering"]
        assert basket.course.matched_baskets == []

    def test_double_count_when_plan_lacks_course_then_own_record_used(self, view_of):
        basket = leaf("CS2103T")
        basket.double_count(view_of(("MA1521", 4)))
        assert basket.course.matched_baskets == [basket]


class TestMultiModuleBasket:
    """Tests for bulk/category requirements."""

    @pytest.fixture
    def pool(self, view_of):
        # Deliberately not sorted by credits
        return view_of(("CS1050", 5), ("CS1010", 1), ("CS1020", 1))

    def test_evaluate_when_requirement_small_then_takes_cheapest_first(self, pool):
        basket = MultiModuleBasket(prefixes={"CS"}, required_credits=2, early_terminate=True)
        result = basket.evaluate(pool)
        assert result.matched_codes == ["CS1010", "CS1020"]
        assert result.matched_credits == 2
        assert result.satisfied is True

    def test_evaluate_when_requirement_unreachable_then_takes_all(self, pool):
        basket = MultiModuleBasket(prefixes={"CS"}, required_credits=10, early_terminate=True)
        result = basket.evaluate(pool)
        assert result.matched_codes == ["CS1010", "CS1020", "CS1050"]
        assert result.matched_credits == 7
        assert result.satisfied is False

    def test_evaluate_when_early_terminate_off_then_takes_all(self, pool):
        basket = MultiModuleBasket(prefixes={"CS"}, required_credits=2, early_terminate=False)
        result = basket.evaluate(pool)
        assert result.matched_credits == 7
        assert result.satisfied is True

    def test_evaluate_when_no_credit_requirement_then_always_satisfied(self, view_of):
        basket = MultiModuleBasket(prefixes={"GEH"})
        result = basket.evaluate(view_of(("CS1010", 4)))
        assert result.satisfied is True
        assert result.matched_credits == 0

    def test_evaluate_when_no_parameters_then_matches_everything(self, pool):
        assert len(MultiModuleBasket().evaluate(pool).matched_modules) == 3

    def test_evaluate_when_filters_combined_then_all_must_hold(self, view_of):
        view = view_of(("CS2103T", 4), ("CS2103", 4), ("CS3230", 4), ("MA2101S", 5), ("CS2101", 4))
        basket = MultiModuleBasket(prefixes={"CS"}, levels={2}, suffixes={""})
        assert basket.evaluate(view).matched_codes == ["CS2101", "CS2103"]

    def test_evaluate_when_pattern_given_then_searches_code(self, view_of):
        view = view_of(("CS3230", 4), ("CS3231", 4), ("CS4231", 4))
        basket = MultiModuleBasket(pattern=r"^CS3")
        assert basket.evaluate(view).matched_codes == ["CS3230", "CS3231"]

    def test_evaluate_when_matched_then_each_course_sends_event(self, pool):
        basket = MultiModuleBasket(prefixes={"CS"}, required_credits=2)
        basket.evaluate(pool)
        claimed = [c.code for c in pool.courses() if c.matched_baskets == [basket]]
        assert sorted(claimed) == ["CS1010", "CS1020"]

    def test_init_when_negative_credits_then_raises_error(self):
        with pytest.raises(BasketConstructionError):
            MultiModuleBasket(prefixes={"CS"}, required_credits=-1)

    def test_effective_pattern_when_pattern_given_then_returns_it(self):
        assert MultiModuleBasket(pattern=r"^CS3\d{3}$").effective_pattern() == r"^CS3\d{3}$"

    def test_effective_pattern_when_filters_given_then_builds_regex(self):
        basket = MultiModuleBasket(prefixes={"CS", "MA"}, levels={3, 4})
        assert basket.effective_pattern() == r"^(CS|MA)[34]\d+[A-Z]*$"


class TestArrayBasket:
    """Tests for AND / OR / at-least-N combinators."""

    @pytest.fixture
    def view(self, view_of):
        return view_of(("CS1101S", 4), ("MA1521", 4), ("ST2334", 4))

    @pytest.mark.parametrize("codes, expected", [
        (["CS1101S", "MA1521", "ST2334"], True),
        (["CS1101S", "MA1521", "CS2040S"], False),
        (["CS2040S", "CS2030S"], False),
        ([], True),
    ])
    def test_all_of_when_evaluated_then_needs_every_child(self, view, codes, expected):
        basket = ArrayBasket.all_of("", [leaf(code) for code in codes])
        assert basket.evaluate(view).satisfied is expected

    @pytest.mark.parametrize("codes, expected", [
        (["CS2040S", "MA1521"], True),
        (["CS1101S"], True),
        (["CS2040S", "CS2030S"], False),
        ([], False),
    ])
    def test_any_of_when_evaluated_then_needs_one_child(self, view, codes, expected):
        basket = ArrayBasket.any_of("", [leaf(code) for code in codes])
        assert basket.evaluate(view).satisfied is expected

    @pytest.mark.parametrize("n, expected", [(0, True), (1, True), (2, True), (3, False)])
    def test_at_least_when_evaluated_then_counts_satisfied_children(self, view, n, expected):
        children = [leaf("CS1101S"), leaf("CS2040S"), leaf("MA1521"), leaf("CS2030S")]
        assert ArrayBasket.at_least("", n, children).evaluate(view).satisfied is expected

    @pytest.mark.parametrize("early_terminate", [True, False])
    def test_at_least_when_early_terminate_toggled_then_same_outcome(self, view, early_terminate):
        children = [leaf("CS1101S"), leaf("CS2040S"), leaf("MA1521")]
        basket = ArrayBasket("", children, ComparisonOp.GEQ, 2, early_terminate)
        assert basket.evaluate(view).satisfied is True

    def test_at_least_when_strict_then_threshold_is_n_plus_one(self, view):
        children = [leaf("CS1101S"), leaf("CS2040S"), leaf("MA1521")]
        basket = ArrayBasket.at_least("", 2, children, strict=True)
        assert basket.threshold == 3
        assert basket.evaluate(view).satisfied is False

    def test_at_least_when_strict_and_enough_then_satisfied(self, view):
        children = [leaf("CS1101S"), leaf("MA1521"), leaf("ST2334")]
        assert ArrayBasket.at_least("", 2, children, strict=True).evaluate(view).satisfied is True

    def test_at_least_when_strict_threshold_reached_then_later_children_not_evaluated(self, view_of):
        view = view_of(("CS1101S", 4), ("MA1521", 4), ("ST2334", 4), ("CS2040S", 4))
        children = [leaf("CS1101S"), leaf("MA1521"), leaf("ST2334"), leaf("CS2040S")]
        basket = ArrayBasket.at_least("", 2, children, strict=True)

        result = basket.evaluate(view)

        assert result.satisfied is True
        assert result.matched_codes == ["CS1101S", "MA1521", "ST2334"]
        assert result.matched_credits == 12
        assert children[3].criterion_state.satisfied is False
        assert view.find("CS2040S").matched_baskets == []

    def test_any_of_when_first_satisfied_then_later_children_not_evaluated(self, view):
        first, second = leaf("CS1101S"), leaf("MA1521")
        basket = ArrayBasket.any_of("", [first, second])

        result = basket.evaluate(view)

        assert result.matched_codes == ["CS1101S"]
        assert second.criterion_state.satisfied is False
        assert view.find("MA1521").matched_baskets == []

    def test_all_of_when_partially_satisfied_then_reports_progress(self, view):
        basket = ArrayBasket.all_of("", [leaf("CS1101S"), leaf("CS2040S")])
        result = basket.evaluate(view)
        assert result.satisfied is False
        assert result.matched_credits == 4
        assert result.matched_codes == ["CS1101S"]

    def test_evaluate_when_child_unsatisfied_bulk_then_partial_credits_counted(self, view):
        bulk = MultiModuleBasket(prefixes={"CS", "MA"}, required_credits=12)
        basket = ArrayBasket.all_of("", [bulk])
        result = basket.evaluate(view)
        assert result.satisfied is False
        assert result.matched_credits == 8

    def test_init_when_negative_threshold_then_raises_error(self):
        with pytest.raises(BasketConstructionError):
            ArrayBasket("", [], ComparisonOp.GEQ, -1)

    def test_init_when_child_already_has_parent_then_raises_error(self):
        child = leaf("CS1101S")
        ArrayBasket.any_of("first", [child])
        with pytest.raises(BasketConstructionError):
            ArrayBasket.any_of("second", [child])

    def test_init_when_child_listed_twice_then_no_child_adopted(self):
        first, repeated = leaf("CS1101S"), leaf("MA1521")
        with pytest.raises(BasketConstructionError, match="listed twice"):
            ArrayBasket.any_of("x", [first, repeated, repeated])
        assert first.parent is None
        assert repeated.parent is None

        basket = ArrayBasket.any_of("y", [first, repeated])
        assert first.parent is basket
        assert repeated.parent is basket

    def test_init_when_later_child_invalid_then_earlier_children_stay_free(self):
        child = leaf("CS1101S")
        with pytest.raises(BasketConstructionError):
            ArrayBasket.all_of("", [child, "CS2040S"])
        assert child.parent is None

    def test_init_when_children_given_then_parent_set(self):
        child = leaf("CS1101S")
        basket = ArrayBasket.any_of("", [child])
        assert child.parent is basket
        assert basket.is_top_level()
        assert not child.is_top_level()


class TestFulfillmentResultBasket:
    """Tests for threshold-result gates."""

    @pytest.fixture
    def three_credit_view(self, view_of):
        return view_of(("CS2101", 3))

    def test_evaluate_when_predicate_fails_then_unsatisfied_but_progress_kept(self, three_credit_view):
        child = MultiModuleBasket(prefixes={"CS"})
        gate = FulfillmentResultBasket.at_least_credits("Writing", 4, child)

        result = gate.evaluate(three_credit_view)

        assert result.satisfied is False
        assert result.matched_credits == 3
        assert result.matched_codes == ["CS2101"]

    def test_evaluate_when_predicate_holds_then_passes_child_result(self, three_credit_view):
        child = MultiModuleBasket(prefixes={"CS"})
        gate = FulfillmentResultBasket.at_least_credits("Writing", 3, child)
        result = gate.evaluate(three_credit_view)
        assert result.satisfied is True
        assert result.matched_credits == 3

    def test_evaluate_when_child_unsatisfied_then_unsatisfied(self, view_of):
        child = leaf("CS2040S")
        gate = FulfillmentResultBasket("", child, lambda result: True)
        assert gate.evaluate(view_of(("CS1101S", 4))).satisfied is False

    def test_at_least_modules_when_counted_then_uses_module_count(self, view_of):
        view = view_of(("CS3230", 4), ("CS3231", 4))
        child = MultiModuleBasket(levels={3})
        assert FulfillmentResultBasket.at_least_modules("", 2, child).evaluate(view).satisfied is True
        child = MultiModuleBasket(levels={3})
        assert FulfillmentResultBasket.at_least_modules("", 3, child).evaluate(view).satisfied is False


class TestStatefulBasket:
    """Tests for double-count prevention through shared BasketState."""

    def test_evaluate_when_siblings_share_state_then_first_claims_course(self, view_of):
        view = view_of(("ST2132", 4))
        state = BasketState()
        list_a = ArrayBasket.any_of("List A", [leaf("ST2132"), leaf("PC2130")])
        list_b = ArrayBasket.any_of("List B", [leaf("ST2132"), leaf("EC2101")])
        first = StatefulBasket(list_a, state)
        second = StatefulBasket(list_b, state)
        root = ArrayBasket.all_of("", [first, second])

        result = root.evaluate(view)

        assert first.criterion_state.satisfied is True
        assert second.criterion_state.satisfied is False
        assert result.satisfied is False
        assert "ST2132" in state

    def test_evaluate_when_states_differ_then_course_counts_twice(self, view_of):
        view = view_of(("ST2132", 4))
        first = StatefulBasket(leaf("ST2132"))
        second = StatefulBasket(leaf("ST2132"))
        assert ArrayBasket.all_of("", [first, second]).evaluate(view).satisfied is True

    def test_evaluate_when_unrelated_wrappers_share_state_then_exclusion_applies(self, view_of):
        """Wrappers in different branches still see each other's claims."""
        view = view_of(("CS3230", 4), ("MA1521", 4))
        state = BasketState()
        left = ArrayBasket.all_of("Left", [leaf("MA1521"), StatefulBasket(leaf("CS3230"), state)])
        right = ArrayBasket.all_of("Right", [StatefulBasket(leaf("CS3230"), state)])
        root = ArrayBasket.all_of("", [left, right])

        root.evaluate(view)

        assert left.criterion_state.satisfied is True
        assert right.criterion_state.satisfied is False

    def test_evaluate_when_state_seeded_then_codes_hidden(self, view_of):
        wrapper = StatefulBasket(leaf("MA2101"), BasketState(["MA2101"]))
        assert wrapper.evaluate(view_of(("MA2101", 4))).satisfied is False

    def test_accept_event_when_double_count_then_code_not_claimed(self):
        state = BasketState()
        inner = leaf("CS2103T")
        StatefulBasket(inner, state)
        inner.double_count()
        assert "CS2103T" not in state

    def test_init_when_no_state_then_fresh_state(self):
        a = StatefulBasket(leaf("CS1101S"))
        b = StatefulBasket(leaf("CS1101S"))
        assert a.shared_state is not b.shared_state


class TestEventsAndState:
    """Tests for upward event propagation and accumulated state."""

    def test_send_event_upwards_when_leaf_matches_then_every_ancestor_records(self, view_of):
        view = view_of(("CS1101S", 4))
        child = leaf("CS1101S")
        middle = ArrayBasket.any_of("Programming", [child])
        root = ArrayBasket.all_of("Degree", [middle])

        root.evaluate(view)

        assert view.find("CS1101S").matched_baskets == [child, middle, root]

    def test_evaluate_with_state_when_reevaluated_then_satisfied_is_sticky(self, view_of):
        basket = leaf("CS1101S")
        basket.evaluate_with_state(view_of(("CS1101S", 4)))
        state = basket.evaluate_with_state(PlanView.of([]))
        assert state.satisfied is True
        assert state.matched_credits == 0
        assert state.matched_codes == ["CS1101S"]

    def test_reset_subtree_state_when_called_then_descendants_cleared(self, view_of):
        child = leaf("CS1101S")
        root = ArrayBasket.any_of("", [child])
        root.evaluate_with_state(view_of(("CS1101S", 4)))

        root.reset_subtree_state()

        assert root.criterion_state.satisfied is False
        assert child.criterion_state.matched_modules == set()

    def test_repr_when_untitled_then_uses_description(self):
        assert repr(leaf("CS1101S")) == "ModuleBasket('CS1101S')"
        assert repr(ArrayBasket.any_of("Core", [])) == "ArrayBasket('Core')"
