from dataclasses import dataclass
from typing import Optional

ROLE_USER = "user"
ROLE_ADMIN = "admin"


@dataclass(frozen=True)
class Caller:
    """Identity of whoever is making the request, handed to every service call."""

    id: int
    email: str
    role: str = ROLE_USER

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def get_caller(request) -> Optional[Caller]:
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return None
    return Caller(
        id=user.pk,
        email=(user.email or "").strip().lower(),
        role=ROLE_ADMIN if user.is_staff else ROLE_USER,
    )


def owns_appointment(caller: Optional[Caller], appointment) -> bool:
    if caller is None:
        return False
    if appointment.user_id is not None and appointment.user_id == caller.id:
        return True
    return bool(caller.email) and appointment.customer_email == caller.email


def can_manage(caller: Optional[Caller], appointment) -> bool:
    return caller is not None and (caller.is_admin or owns_appointment(caller, appointment))
