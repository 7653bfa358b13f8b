"""Dashboard summary: streak length and recovered time ("vital capital")"""
import math
from datetime import datetime
from typing import Optional

from desviciar.config import settings
from desviciar.core.firebase import FirebaseContext
from desviciar.models.user import USERS_COLLECTION, UserAccount
from desviciar.schemas.dashboard import DashboardResponse
from desviciar.utils.time_utils import parse_streak_start, to_calendar_day, utc_now

# (hours reached, message), ascending
VITAL_CAPITAL_MILESTONES = [
    (1, "Daria para um treino intenso de musculação."),
    (3, "Tempo suficiente para ver um filme épico."),
    (5, "Poderia ter lido um livro curto inteiro."),
    (10, "Daria para aprender o básico de um novo idioma."),
    (24, "Um dia inteiro de vida recuperado!"),
    (50, "Tempo de zerar um jogo complexo ou criar um projeto."),
    (100, "Daria para atingir nível intermediário em inglês."),
    (500, "Metade do caminho para ser expert em algo."),
    (1000, "Você poderia ter mudado de carreira com esse tempo."),
]
DEFAULT_VITAL_MESSAGE = "O começo da liberdade... Continue firme."


def vital_message(hours_saved: int) -> str:
    """Message for the highest milestone reached"""
    for hours, text in reversed(VITAL_CAPITAL_MILESTONES):
        if hours_saved >= hours:
            return text
    return DEFAULT_VITAL_MESSAGE


def hours_saved(streak_start: datetime, now: datetime, daily_minutes: Optional[int]) -> int:
    """Whole hours not spent on the habit since the streak started"""
    minutes = daily_minutes or settings.DEFAULT_DAILY_ADDICTION_MINUTES
    elapsed_days = max(0.0, (now - streak_start).total_seconds() / 86400)
    return math.floor(elapsed_days * minutes / 60)


class DashboardService:
    """Service for the dashboard header cards"""

    def __init__(self, firebase: FirebaseContext):
        self.firebase = firebase

    def get_summary(self, uid: str, now: Optional[datetime] = None) -> DashboardResponse:
        """
        Get the streak summary for a user

        Raises:
            ValueError: If the user has no profile yet (onboarding not done)
        """
        snapshot = self.firebase.db.collection(USERS_COLLECTION).document(uid).get()
        if not snapshot.exists:
            raise ValueError("User profile not found")

        account = UserAccount.from_document(uid, snapshot.to_dict())
        now = now or utc_now()

        start = parse_streak_start(account.current_streak_start)
        if start is None:
            saved = 0
            streak_days = 0
        else:
            saved = hours_saved(start, now, account.daily_addiction_minutes)
            streak_days = max(0, (now - start).days)

        local_start = to_calendar_day(start)

        return DashboardResponse(
            streak_start=local_start,
            streak_days=streak_days,
            hours_saved=saved,
            vital_message=vital_message(saved),
            subscription_status=account.subscription_status,
            is_subscriber=account.is_subscriber,
        )
