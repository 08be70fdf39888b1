"""
API Views for the Draco application.

Every view is an APIView that answers with the {category, message, data}
envelope. Each view lists its actions as `method -> (category, verb)`; the
verb produces "<Verb> successful" here and "<Verb> failed" in the exception
handler, so success and failure messages for a route always agree.

Ownership: views read the acting player from request.user (set by the bearer
token gate), never from the body or the URL. Character, spell, item and
campaign routes do not yet check that the caller owns the resource; those
gaps are marked with TODOs below.
"""

from django.apps import apps
from django.urls import reverse
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .exceptions import ValidationError
from .serializers import (
    CampaignCreationSerializer,
    CampaignParticipantSerializer,
    CampaignSerializer,
    CampaignUpdateSerializer,
    CharacterSerializer,
    ItemSerializer,
    ItemStatsSerializer,
    MilestoneSerializer,
    SpellSchoolCountSerializer,
    SpellSerializer,
    StatsSerializer,
)
from .utils import envelope, parse_id


class DracoAPIView(APIView):
    """
    Base view: access to the application context, action labels, strict input
    parsing and the response envelope.
    """
    permission_classes = [IsAuthenticated]
    action_labels = {}

    @property
    def ctx(self):
        return apps.get_app_config('api').context

    def describe_action(self, method):
        return self.action_labels.get(method.lower(), ("Request", "Request"))

    def respond(self, data=None, status_code=status.HTTP_200_OK):
        category, verb = self.describe_action(self.request.method)
        return Response(envelope(category, f"{verb} successful", data), status=status_code)

    def validated(self, serializer):
        """Runs the serializer and returns its validated data, or raises a 422."""
        if not serializer.is_valid():
            raise ValidationError(detail=serializer.errors)
        return serializer.validated_data

    def path_id(self, raw):
        value = parse_id(raw)
        if value is None:
            raise ValidationError(f"{self.describe_action(self.request.method)[1]} failed",
                                  detail=f"Malformed id {raw!r}")
        return value


class PublicCharacterView(DracoAPIView):
    """
    Anyone can look a character up by id.
    Endpoint: /character/<id>
    """
    authentication_classes = []
    permission_classes = [AllowAny]
    action_labels = {'get': ("Character retrieval", "Retrieval")}

    def get(self, request, character_id):
        character = self.ctx.characters.get(self.path_id(character_id))
        return self.respond(CharacterSerializer(character).data)


class StatsView(DracoAPIView):
    """
    Global counters.
    Endpoint: /stat
    """
    authentication_classes = []
    permission_classes = [AllowAny]
    action_labels = {'get': ("Retrieve all stats", "Retrieval")}

    def get(self, request):
        return self.respond(StatsSerializer(self.ctx.stats.get_all()).data)


class CharacterCreateView(DracoAPIView):
    """
    Endpoint: /auth/character
    """
    action_labels = {'post': ("Character creation", "Creation")}

    def post(self, request):
        fields = self.validated(CharacterSerializer(data=request.data))
        character = self.ctx.characters.insert(request.user.username, **fields)
        return self.respond(
            {'resource_uri': reverse('character-public', args=[character.id])},
            status_code=status.HTTP_201_CREATED,
        )


class PlayerCharactersView(DracoAPIView):
    """
    The caller's own characters.
    Endpoint: /auth/character/me
    """
    action_labels = {'get': ("Retrieve all user characters", "Retrieval")}

    def get(self, request):
        characters = self.ctx.characters.get_all_for(request.user.username)
        return self.respond({'characters': CharacterSerializer(characters, many=True).data})


class CharacterDetailView(DracoAPIView):
    """
    Endpoint: /auth/character/<id>
    """
    action_labels = {
        'get': ("Character retrieval", "Retrieval"),
        'put': ("Character update", "Update"),
        'delete': ("Character deletion", "Deletion"),
    }

    def get(self, request, character_id):
        character = self.ctx.characters.get(self.path_id(character_id))
        return self.respond(CharacterSerializer(character).data)

    def put(self, request, character_id):
        # TODO: only the character's owner should be able to update it.
        character_id = self.path_id(character_id)
        fields = self.validated(CharacterSerializer(data=request.data))
        character = self.ctx.characters.update(character_id, **fields)
        return self.respond(CharacterSerializer(character).data)

    def delete(self, request, character_id):
        # TODO: only the character's owner should be able to delete it.
        self.ctx.characters.delete(self.path_id(character_id))
        return self.respond()


class SpellListView(DracoAPIView):
    """
    Endpoint: /auth/character/<id>/spell
    """
    action_labels = {
        'post': ("Spell creation", "Creation"),
        'get': ("Retrieve all character spells", "Retrieval"),
    }

    def post(self, request, character_id):
        # TODO: check that the character belongs to request.user.
        character_id = self.path_id(character_id)
        fields = self.validated(SpellSerializer(data=request.data))
        self.ctx.spells.insert(character_id, **fields)
        return self.respond(status_code=status.HTTP_201_CREATED)

    def get(self, request, character_id):
        spells = self.ctx.spells.get_all_for(self.path_id(character_id))
        return self.respond({'spells': SpellSerializer(spells, many=True).data})


class SpellDetailView(DracoAPIView):
    """
    Endpoint: /auth/character/<id>/spell/<name>
    """
    action_labels = {
        'get': ("Spell retrieval", "Retrieval"),
        'delete': ("Spell deletion", "Deletion"),
    }

    def get(self, request, character_id, name):
        spell = self.ctx.spells.get(self.path_id(character_id), name)
        return self.respond(SpellSerializer(spell).data)

    def delete(self, request, character_id, name):
        # TODO: check that the character belongs to request.user.
        self.ctx.spells.delete(self.path_id(character_id), name)
        return self.respond()


class SpellSchoolCountView(DracoAPIView):
    """
    Endpoint: /auth/character/<id>/spell/count-per-school
    """
    action_labels = {'get': ("Retrieve count character spells per school", "Retrieval")}

    def get(self, request, character_id):
        counts = self.ctx.spells.count_per_school(self.path_id(character_id))
        return self.respond({'spells_count': SpellSchoolCountSerializer(counts, many=True).data})


class ItemListView(DracoAPIView):
    """
    Endpoint: /auth/character/<id>/item
    """
    action_labels = {
        'post': ("Item creation", "Creation"),
        'get': ("Retrieve all character items", "Retrieval"),
    }

    def post(self, request, character_id):
        # TODO: check that the character belongs to request.user.
        character_id = self.path_id(character_id)
        fields = self.validated(ItemSerializer(data=request.data))
        self.ctx.items.insert(character_id, **fields)
        return self.respond(status_code=status.HTTP_201_CREATED)

    def get(self, request, character_id):
        items = self.ctx.items.get_all_for(self.path_id(character_id))
        return self.respond({'items': ItemSerializer(items, many=True).data})


class ItemDetailView(DracoAPIView):
    """
    Endpoint: /auth/character/<id>/item/<name>
    """
    action_labels = {
        'get': ("Item retrieval", "Retrieval"),
        'delete': ("Item deletion", "Deletion"),
    }

    def get(self, request, character_id, name):
        item = self.ctx.items.get(self.path_id(character_id), name)
        return self.respond(ItemSerializer(item).data)

    def delete(self, request, character_id, name):
        # TODO: check that the character belongs to request.user.
        self.ctx.items.delete(self.path_id(character_id), name)
        return self.respond()


class ItemStatsView(DracoAPIView):
    """
    Endpoint: /auth/character/<id>/item/stats
    """
    action_labels = {'get': ("Retrieve character item stats", "Retrieval")}

    def get(self, request, character_id):
        stats = self.ctx.items.stats(self.path_id(character_id))
        return self.respond({'stats': ItemStatsSerializer(stats).data})


class CharacterCampaignsView(DracoAPIView):
    """
    Campaigns a character takes part in.
    Endpoint: /auth/character/<id>/campaign
    """
    action_labels = {'get': ("Retrieve all character campaigns", "Retrieval")}

    def get(self, request, character_id):
        campaigns = self.ctx.campaigns.get_all_character_campaigns(self.path_id(character_id))
        return self.respond({'campaigns': CampaignSerializer(campaigns, many=True).data})


class CampaignCreateView(DracoAPIView):
    """
    The caller becomes the dungeon master of the new campaign.
    Endpoint: /auth/campaign
    """
    action_labels = {'post': ("Campaign creation", "Creation")}

    def post(self, request):
        data = self.validated(CampaignCreationSerializer(data=request.data))
        campaign = self.ctx.campaigns.insert(
            request.user.username,
            data['character_id'],
            **data['campaign'],
        )
        return self.respond(
            {'resource_uri': reverse('campaign-detail', args=[campaign.id])},
            status_code=status.HTTP_201_CREATED,
        )


class PlayerCampaignsView(DracoAPIView):
    """
    Campaigns the caller runs as dungeon master.
    Endpoint: /auth/campaign/me
    """
    action_labels = {'get': ("Retrieve all player's started campaigns", "Retrieval")}

    def get(self, request):
        campaigns = self.ctx.campaigns.get_all_for(request.user.username)
        return self.respond({'campaigns': CampaignSerializer(campaigns, many=True).data})


class PlayerAttendanceView(DracoAPIView):
    """
    Players with a character in every campaign the caller runs.
    Endpoint: /auth/campaign/me/stats/player-attendance
    """
    action_labels = {
        'get': ("Campaign stats - Players with perfect attendance in requestor's created campaigns",
                "Retrieval"),
    }

    def get(self, request):
        usernames = self.ctx.campaigns.get_players_attended_all(request.user.username)
        return self.respond({'usernames': usernames})


class CampaignDetailView(DracoAPIView):
    """
    Endpoint: /auth/campaign/<id>
    """
    action_labels = {
        'put': ("Campaign modification", "Modification"),
        'delete': ("Campaign deletion", "Deletion"),
    }

    def put(self, request, campaign_id):
        # TODO: only the dungeon master should be able to modify the campaign.
        campaign_id = self.path_id(campaign_id)
        data = self.validated(CampaignUpdateSerializer(data=request.data))
        campaign = self.ctx.campaigns.update(campaign_id, data['state'], data['location'])
        return self.respond(CampaignSerializer(campaign).data)

    def delete(self, request, campaign_id):
        # TODO: only the dungeon master should be able to delete the campaign;
        # right now any authenticated player can.
        self.ctx.campaigns.delete(self.path_id(campaign_id))
        return self.respond()


class MilestoneListView(DracoAPIView):
    """
    Endpoint: /auth/campaign/<id>/milestone
    """
    action_labels = {
        'post': ("Milestone creation", "Creation"),
        'get': ("Milestone retrieval", "Retrieval"),
    }

    def post(self, request, campaign_id):
        campaign_id = self.path_id(campaign_id)
        data = self.validated(MilestoneSerializer(data=request.data))
        self.ctx.milestones.insert(campaign_id, data['milestone'])
        return self.respond(status_code=status.HTTP_201_CREATED)

    def get(self, request, campaign_id):
        milestones = self.ctx.milestones.get_all_for(self.path_id(campaign_id))
        return self.respond({'milestones': milestones})


class CampaignParticipantsView(DracoAPIView):
    """
    Endpoint: /auth/campaign/<id>/participants
    """
    action_labels = {'get': ("Campaign participant retrieval", "Retrieval")}

    def get(self, request, campaign_id):
        participants = self.ctx.campaigns.get_participants(self.path_id(campaign_id))
        return self.respond(
            {'participants': CampaignParticipantSerializer(participants, many=True).data}
        )
