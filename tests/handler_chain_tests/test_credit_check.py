import pytest
from handler_chain.credit_check import CreditPolicy, Student, build_credit_chain


@pytest.mark.unit
def test_final_semester_wins_even_when_credits_match():
    out = build_credit_chain().dispatch(Student("Ana", semester=10, credits=6))
    assert out.handled and out.handler_name == "SemesterChecker"
    assert out.visited == ("SemesterChecker",)
    assert out.result.approved is True


@pytest.mark.unit
def test_credit_checker_handles_non_final_semester():
    out = build_credit_chain().dispatch(Student("Ben", semester=8, credits=6))
    assert out.handled and out.handler_name == "CreditChecker"


@pytest.mark.unit
def test_insufficient_credits_is_unhandled():
    out = build_credit_chain().dispatch(Student("Cy", semester=8, credits=2))
    assert out.handled is False and out.result is None


@pytest.mark.unit
def test_policy_thresholds():
    chain = build_credit_chain(CreditPolicy(final_semester=8, min_credits=10))
    assert chain.dispatch(Student("Di", semester=8, credits=0)).handler_name == "SemesterChecker"
    assert chain.dispatch(Student("Ed", semester=6, credits=9)).handled is False
