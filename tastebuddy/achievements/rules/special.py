from __future__ import annotations

from tastebuddy.achievements.rules.base import FlagRule


class SupremeLeader(FlagRule):
    '''Reserved for the account whose email matches SITE_OWNER_EMAIL.'''

    code = 'supreme_leader'
    name = 'Supreme Leader'
    description = 'The legendary founder and supreme leader of TasteBuddy'
    category = 'SPECIAL'
    icon = '🦄🌈'
    color = '#EC4899'
    flag = 'is_site_owner'


RULES = (SupremeLeader(),)
