# models_bootstrap.py
# Registers every mapped class on Base.metadata before create_all / alembic autogenerate.
from user import models as _user_models
from employee import models as _employee_models
from team import models as _team_models
from assignment import models as _assignment_models
