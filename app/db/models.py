# Import all models here so Alembic can discover them
from app.db.base import Base

# Users first (referenced by the other tables)
from app.features.users.models import User
from app.features.quests.models import Quest
from app.features.submissions.models import QuestSubmission
from app.features.badges.models import Badge

# This ensures all models are registered with SQLAlchemy
__all__ = [
	"Base",
	"User",
	"Quest",
	"QuestSubmission",
	"Badge",
]
