"""
The application context: the token service plus one repository per entity
family, built once at startup and handed to every view and to the
authentication gate.
"""

from dataclasses import dataclass

from django.conf import settings

from .repositories import (
    CampaignRepository,
    CharacterRepository,
    ItemRepository,
    MilestoneRepository,
    PlayerRepository,
    SpellRepository,
    StatsRepository,
)
from .tokens import DEFAULT_ALGORITHM, DEFAULT_LIFETIME, TokenService


@dataclass(frozen=True)
class AppContext:
    tokens: TokenService
    players: PlayerRepository
    characters: CharacterRepository
    spells: SpellRepository
    items: ItemRepository
    campaigns: CampaignRepository
    milestones: MilestoneRepository
    stats: StatsRepository


def build_context(config=None):
    """
    Builds an AppContext from a config mapping, defaulting to settings.DRACO.

    Recognised keys: SIGNING_KEY, TOKEN_LIFETIME (timedelta),
    TOKEN_ALGORITHM and DATABASE_ALIAS.
    """
    if config is None:
        config = getattr(settings, 'DRACO', {})

    using = config.get('DATABASE_ALIAS', 'default')
    tokens = TokenService(
        signing_key=config.get('SIGNING_KEY') or settings.SECRET_KEY,
        lifetime=config.get('TOKEN_LIFETIME', DEFAULT_LIFETIME),
        algorithm=config.get('TOKEN_ALGORITHM', DEFAULT_ALGORITHM),
    )
    return AppContext(
        tokens=tokens,
        players=PlayerRepository(using),
        characters=CharacterRepository(using),
        spells=SpellRepository(using),
        items=ItemRepository(using),
        campaigns=CampaignRepository(using),
        milestones=MilestoneRepository(using),
        stats=StatsRepository(using),
    )
