from linkfinder.dao.base.link_base_dao import LinkBaseDAO
from linkfinder.dao.base.user_base_dao import UserBaseDAO


__all__ = [
    'LinkBaseDAO',
    'UserBaseDAO',
]
