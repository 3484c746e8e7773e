# Importing the models registers every table on Base.metadata
from roster.models.user import User, Role, ROLE_LEVELS
from roster.models.driver import Driver, DriverStatus
from roster.models.evaluation import EvaluationItem, DriverEvaluation, MonthlyRating, SCORE_SCALE
from roster.models.settings import UserSettings
