"""Question/answer board stored in two comma-separated line files.

Layout:
    .askme/
        users.txt       # id,name,secret,username,email,anon,role
        questions.txt   # id,parent_id,from_id,to_id,anon,text,answer

Both files are read once when a repository is opened and rewritten wholesale
after every successful mutation.  Malformed lines are logged and skipped on
load.
"""

from askme.accounts import AccountRepository
from askme.config import AskMeConfig, init_config, load_config
from askme.models import NO_PARENT, Account, Role, Thread
from askme.threads import DeleteResult, ThreadRepository

__all__ = [
    "NO_PARENT",
    "Account",
    "AccountRepository",
    "AskMeConfig",
    "DeleteResult",
    "Role",
    "Thread",
    "ThreadRepository",
    "init_config",
    "load_config",
]
