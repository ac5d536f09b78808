from linkfinder.models.link_model import LinkModel, LinkRequest, LinkStatus
from linkfinder.models.user_model import UserModel, RegistrationRequest, Role
from linkfinder.models.page_model import Page
from linkfinder.models.import_model import ImportReport, RowError
from linkfinder.models.token_model import TokenClaims, IssuedToken


__all__ = [
    'LinkModel',
    'LinkRequest',
    'LinkStatus',
    'UserModel',
    'RegistrationRequest',
    'Role',
    'Page',
    'ImportReport',
    'RowError',
    'TokenClaims',
    'IssuedToken',
]
