from typing import Dict, List, Optional, Sequence

from ..errors import QuizStateError
from ..schemas import OptionState, QuizOptionView, QuizQuestion, QuizQuestionView, QuizView


class QuizForm:
    """Per-question answers, one-way submission and scoring."""

    def __init__(self, questions: Sequence[QuizQuestion]):
        self.questions: List[QuizQuestion] = list(questions)
        self.answers: Dict[int, str] = {}
        self.submitted = False
        self.score: Optional[int] = None

    @property
    def can_submit(self) -> bool:
        return not self.submitted and len(self.answers) == len(self.questions)

    @property
    def can_regenerate(self) -> bool:
        return self.submitted

    def select(self, index: int, option: str) -> bool:
        if self.submitted:
            return False
        if not 0 <= index < len(self.questions):
            raise QuizStateError(f"There is no question {index + 1}.")
        if option not in self.questions[index].options:
            raise QuizStateError("That option does not belong to this question.")
        self.answers[index] = option
        return True

    def submit(self) -> Optional[int]:
        if not self.can_submit:
            return None
        self.score = sum(
            1 for i, q in enumerate(self.questions) if self.answers.get(i) == q.answer
        )
        self.submitted = True
        return self.score

    def option_state(self, index: int, option: str) -> OptionState:
        q = self.questions[index]
        chosen = self.answers.get(index)
        if not self.submitted:
            return OptionState.SELECTED if chosen == option else OptionState.IDLE
        if option == q.answer:
            return OptionState.CORRECT
        if option == chosen:
            return OptionState.INCORRECT
        return OptionState.NEUTRAL

    def view(self) -> QuizView:
        return QuizView(
            questions=[
                QuizQuestionView(
                    index=i,
                    question=q.question,
                    options=[QuizOptionView(text=o, state=self.option_state(i, o)) for o in q.options],
                    selected=self.answers.get(i),
                )
                for i, q in enumerate(self.questions)
            ],
            answers=dict(self.answers),
            submitted=self.submitted,
            can_submit=self.can_submit,
            can_regenerate=self.can_regenerate,
            score=self.score,
            total=len(self.questions),
        )
