from __future__ import annotations

import logging
from dataclasses import dataclass

from handler_chain.dispatch import Handler, HandlerChain

__all__ = [
    "Student",
    "Verification",
    "CreditPolicy",
    "SemesterChecker",
    "CreditChecker",
    "build_credit_chain",
]

logger = logging.getLogger(__name__)


# ==========================
# Module: credit_check
# Purpose: Graduation credit verification. Students in their final semester
#          are approved outright; everybody else needs enough credits.
# ==========================


@dataclass(frozen=True, slots=True)
class Student:
    """
    :param name: Student name.
    :param semester: Current semester number.
    :param credits: Accumulated credits.
    """
    name: str
    semester: int
    credits: int


@dataclass(frozen=True, slots=True)
class Verification:
    """
    :param approved: Whether the student passed verification.
    :param reason: Which rule approved the student.
    """
    approved: bool
    reason: str


@dataclass(frozen=True)
class CreditPolicy:
    """
    Thresholds for verification.

    :param final_semester: Semester that is approved without a credit check.
    :param min_credits: Minimum credits for everyone else.
    """
    final_semester: int = 10
    min_credits: int = 5


class SemesterChecker(Handler):
    """Approves students in the final semester."""

    def __init__(self, policy: CreditPolicy) -> None:
        super().__init__()
        self._policy = policy

    def can_handle(self, request: Student) -> bool:
        return request.semester == self._policy.final_semester

    def process(self, request: Student) -> Verification:
        logger.info("%s approved: final semester %d", request.name, request.semester)
        return Verification(True, f"semester {request.semester} is the final semester")


class CreditChecker(Handler):
    """Approves students with at least the minimum number of credits."""

    def __init__(self, policy: CreditPolicy) -> None:
        super().__init__()
        self._policy = policy

    def can_handle(self, request: Student) -> bool:
        return request.credits >= self._policy.min_credits

    def process(self, request: Student) -> Verification:
        logger.info("%s approved: %d credits", request.name, request.credits)
        return Verification(True, f"{request.credits} credits >= {self._policy.min_credits}")


def build_credit_chain(policy: CreditPolicy = CreditPolicy()) -> HandlerChain:
    """
    Builds SemesterChecker -> CreditChecker.

    :param policy: Verification thresholds.
    :return: The verification chain.
    """
    return HandlerChain([SemesterChecker(policy), CreditChecker(policy)], name="credit-check")
