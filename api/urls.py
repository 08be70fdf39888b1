"""
URL Configuration for the API application.

This module defines the routes for the Draco API:
1. Public routes: registration, login, character lookup and global stats.
2. The /auth group, where every view requires a valid bearer token.

Fixed segments (me, count-per-school, stats) are listed before the
parameterised routes they would otherwise be swallowed by. Spell and item
names use the path converter so that a percent-encoded slash survives.
"""

from django.urls import include, path

from .authentication import (
    LoginView,
    PasswordChangeView,
    PlayerDetailView,
    PlayerSelfView,
    RegisterView,
)
from .views import (
    CampaignCreateView,
    CampaignDetailView,
    CampaignParticipantsView,
    CharacterCampaignsView,
    CharacterCreateView,
    CharacterDetailView,
    ItemDetailView,
    ItemListView,
    ItemStatsView,
    MilestoneListView,
    PlayerAttendanceView,
    PlayerCampaignsView,
    PlayerCharactersView,
    PublicCharacterView,
    SpellDetailView,
    SpellListView,
    SpellSchoolCountView,
    StatsView,
)

auth_urlpatterns = [
    path('player/me', PlayerSelfView.as_view(), name='player-self'),
    path('player/me/password', PasswordChangeView.as_view(), name='password-change'),
    path('player/<str:username>', PlayerDetailView.as_view(), name='player-detail'),

    path('character', CharacterCreateView.as_view(), name='character-create'),
    path('character/me', PlayerCharactersView.as_view(), name='character-mine'),
    path('character/<str:character_id>', CharacterDetailView.as_view(), name='character-detail'),
    path('character/<str:character_id>/spell', SpellListView.as_view(), name='spell-list'),
    path('character/<str:character_id>/spell/count-per-school', SpellSchoolCountView.as_view(),
         name='spell-count-per-school'),
    path('character/<str:character_id>/spell/<path:name>', SpellDetailView.as_view(),
         name='spell-detail'),
    path('character/<str:character_id>/item', ItemListView.as_view(), name='item-list'),
    path('character/<str:character_id>/item/stats', ItemStatsView.as_view(), name='item-stats'),
    path('character/<str:character_id>/item/<path:name>', ItemDetailView.as_view(),
         name='item-detail'),
    path('character/<str:character_id>/campaign', CharacterCampaignsView.as_view(),
         name='character-campaigns'),

    path('campaign', CampaignCreateView.as_view(), name='campaign-create'),
    path('campaign/me', PlayerCampaignsView.as_view(), name='campaign-mine'),
    path('campaign/me/stats/player-attendance', PlayerAttendanceView.as_view(),
         name='campaign-player-attendance'),
    path('campaign/<str:campaign_id>', CampaignDetailView.as_view(), name='campaign-detail'),
    path('campaign/<str:campaign_id>/milestone', MilestoneListView.as_view(), name='milestone-list'),
    path('campaign/<str:campaign_id>/participants', CampaignParticipantsView.as_view(),
         name='campaign-participants'),
]

urlpatterns = [
    path('register', RegisterView.as_view(), name='register'),
    path('login', LoginView.as_view(), name='login'),
    path('character/<str:character_id>', PublicCharacterView.as_view(), name='character-public'),
    path('stat', StatsView.as_view(), name='stats'),
    path('auth/', include(auth_urlpatterns)),
]
