"""
Persistence layer for the Draco API.

One repository per entity family. Every repository is constructed with a
database alias and runs all of its queries against that alias, so the
database handle is something the application context passes in rather than
something the repositories reach for.

Classes:
    PlayerRepository: The credential store (register, authenticate, password
                      changes, account deletion).
    CharacterRepository: Character CRUD.
    SpellRepository / ItemRepository: CRUD keyed by (character id, name),
                                      plus per-character aggregates.
    CampaignRepository: Campaign CRUD, participation links and the
                        attendance queries.
    MilestoneRepository: Notes attached to a campaign.
    StatsRepository: Global counters for the public /stat route.
"""

import logging
from contextlib import contextmanager

from django.contrib.auth.hashers import make_password
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Avg, Count, F, FloatField, Max, Sum

from .exceptions import AuthError, ConflictError, NotFoundError, StorageError, ValidationError
from .models import (
    Campaign,
    CampaignMilestone,
    CampaignParticipation,
    Character,
    Item,
    Player,
    Spell,
)

logger = logging.getLogger(__name__)


class Repository:
    """
    Shared plumbing: alias-bound managers, lookups that raise NotFoundError,
    and translation of driver errors into the API's error taxonomy.
    """
    model = None

    def __init__(self, using='default'):
        self.using = using

    @property
    def objects(self):
        return self.model._default_manager.db_manager(self.using).all()

    def atomic(self):
        return transaction.atomic(using=self.using)

    @contextmanager
    def storage(self, action):
        """
        Wraps a unit of database work. Unique-key violations become
        ConflictError, anything else the driver raises becomes StorageError.
        """
        try:
            yield
        except IntegrityError as exc:
            raise ConflictError(detail=f"{action}: {exc}") from exc
        except DatabaseError as exc:
            raise StorageError(detail=f"{action}: {exc}") from exc

    def fetch(self, **lookup):
        name = self.model.__name__
        with self.storage(f"{name} lookup"):
            try:
                return self.objects.get(**lookup)
            except self.model.DoesNotExist as exc:
                raise NotFoundError(detail=f"{name} not found for {lookup}") from exc

    def create(self, **fields):
        name = self.model.__name__
        with self.storage(f"{name} insert"):
            with self.atomic():
                instance = self.objects.create(**fields)
        logger.info("Created %s %s", name, instance.pk)
        return instance

    def change(self, lookup, fields):
        name = self.model.__name__
        with self.storage(f"{name} update"):
            with self.atomic():
                updated = self.objects.filter(**lookup).update(**fields)
        if not updated:
            raise NotFoundError(detail=f"{name} not found for {lookup}")

    def remove(self, **lookup):
        name = self.model.__name__
        with self.storage(f"{name} delete"):
            with self.atomic():
                deleted, _ = self.objects.filter(**lookup).delete()
        if not deleted:
            raise NotFoundError(detail=f"{name} not found for {lookup}")
        logger.info("Deleted %s %s", name, lookup)


class PlayerRepository(Repository):
    """
    The credential store. Passwords are only ever stored as Django password
    hashes.
    """
    model = Player

    def register(self, username, password, name):
        if not password or not password.strip():
            raise ValidationError(detail="Empty password on registration")
        with self.storage("Player insert"):
            with self.atomic():
                player = Player.objects.db_manager(self.using).create_player(
                    username=username, password=password, name=name
                )
        logger.info("Registered player %s", username)
        return player

    def authenticate(self, username, password):
        """
        Returns the username when the password matches.

        Missing players and wrong passwords raise the same AuthError. A
        throwaway hash is computed for missing players so both paths cost
        about the same.
        """
        try:
            player = self.fetch(username=username)
        except NotFoundError:
            make_password(password)
            raise AuthError(detail="Invalid username or password") from None

        if not player.check_password(password):
            raise AuthError(detail="Invalid username or password")
        return player.username

    def get(self, username):
        return self.fetch(username=username)

    def update_password(self, username, new_password):
        if not new_password or not new_password.strip():
            raise ValidationError(detail="Empty password on password change")
        player = self.get(username)
        player.set_password(new_password)
        with self.storage("Player password update"):
            player.save(using=self.using, update_fields=['password'])

    def delete(self, username):
        """Deletes the player along with their characters and the campaigns they run."""
        self.remove(username=username)


class CharacterRepository(Repository):
    model = Character

    def insert(self, player_username, **fields):
        return self.create(player_id=player_username, **fields)

    def get(self, character_id):
        return self.fetch(pk=character_id)

    def get_all_for(self, player_username):
        with self.storage("Character list"):
            return list(self.objects.filter(player_id=player_username).order_by('id'))

    def update(self, character_id, **fields):
        fields.pop('player', None)
        fields.pop('player_id', None)
        self.change({'pk': character_id}, fields)
        return self.get(character_id)

    def delete(self, character_id):
        self.remove(pk=character_id)


class CharacterOwnedRepository(Repository):
    """
    Repositories whose rows are keyed by (character id, name). Names are
    taken as already percent-decoded; Django decodes the request path before
    it reaches a view.
    """

    def insert(self, character_id, **fields):
        return self.create(character_id=character_id, **fields)

    def get(self, character_id, name):
        return self.fetch(character_id=character_id, name=name)

    def get_all_for(self, character_id):
        with self.storage(f"{self.model.__name__} list"):
            return list(self.objects.filter(character_id=character_id).order_by('name'))

    def update(self, character_id, name, **fields):
        fields.pop('character', None)
        fields.pop('character_id', None)
        self.change({'character_id': character_id, 'name': name}, fields)
        return self.get(character_id, fields.get('name', name))

    def delete(self, character_id, name):
        self.remove(character_id=character_id, name=name)


class SpellRepository(CharacterOwnedRepository):
    model = Spell

    def count_per_school(self, character_id):
        """Returns [{'school': ..., 'count': ...}] for the character's spells, sorted by school."""
        with self.storage("Spell count per school"):
            rows = (
                self.objects.filter(character_id=character_id)
                .values('school')
                .annotate(count=Count('id'))
                .order_by('school')
            )
            return [{'school': row['school'], 'count': row['count']} for row in rows]


class ItemRepository(CharacterOwnedRepository):
    model = Item

    def stats(self, character_id):
        """
        Summary statistics over a character's items. Weight and value totals
        count every unit of a stacked item.
        """
        with self.storage("Item stats"):
            items = self.objects.filter(character_id=character_id)
            totals = items.aggregate(
                item_count=Count('id'),
                total_quantity=Sum('quantity'),
                total_weight=Sum(F('weight') * F('quantity'), output_field=FloatField()),
                total_value=Sum(F('value') * F('quantity')),
            )
            heaviest = items.order_by('-weight', 'name').values_list('name', flat=True).first()
            most_valuable = items.order_by('-value', 'name').values_list('name', flat=True).first()

        return {
            'item_count': totals['item_count'],
            'total_quantity': totals['total_quantity'] or 0,
            'total_weight': float(totals['total_weight'] or 0.0),
            'total_value': totals['total_value'] or 0,
            'heaviest_item': heaviest,
            'most_valuable_item': most_valuable,
        }


class CampaignRepository(Repository):
    model = Campaign

    def insert(self, dungeon_master, character_ids, **fields):
        """
        Creates the campaign and its participation links in one transaction.
        If any character is missing or any link fails, the campaign row is
        rolled back with it.
        """
        character_ids = list(dict.fromkeys(character_ids))
        if not character_ids:
            raise ValidationError(detail="A campaign needs at least one character")

        with self.storage("Campaign insert"):
            with self.atomic():
                campaign = self.objects.create(dungeon_master_id=dungeon_master, **fields)
                characters = Character._default_manager.db_manager(self.using).in_bulk(character_ids)
                for character_id in character_ids:
                    if character_id not in characters:
                        raise NotFoundError(
                            detail=f"Character {character_id} does not exist; campaign rolled back"
                        )
                    CampaignParticipation._default_manager.db_manager(self.using).create(
                        campaign=campaign, character_id=character_id
                    )
        logger.info("Created campaign %s with characters %s", campaign.pk, character_ids)
        return campaign

    def get(self, campaign_id):
        return self.fetch(pk=campaign_id)

    def get_all_for(self, dungeon_master):
        """Every campaign the player runs."""
        with self.storage("Campaign list"):
            return list(self.objects.filter(dungeon_master_id=dungeon_master).order_by('id'))

    def get_all_character_campaigns(self, character_id):
        with self.storage("Character campaign list"):
            return list(self.objects.filter(participations__character_id=character_id).order_by('id'))

    def update(self, campaign_id, state, location):
        self.change({'pk': campaign_id}, {'state': state, 'current_location': location})
        return self.get(campaign_id)

    def delete(self, campaign_id):
        self.remove(pk=campaign_id)

    def get_participants(self, campaign_id):
        with self.storage("Campaign participants"):
            rows = (
                CampaignParticipation._default_manager.db_manager(self.using)
                .filter(campaign_id=campaign_id)
                .order_by('character_id')
                .values(
                    'character_id',
                    character_name=F('character__name'),
                    player_username=F('character__player_id'),
                    player_name=F('character__player__name'),
                )
            )
            return list(rows)

    def get_players_attended_all(self, dungeon_master):
        """
        Usernames of players who had a character in every campaign the
        dungeon master has created. Empty when the dungeon master has none.
        """
        with self.storage("Players attended all"):
            total = self.objects.filter(dungeon_master_id=dungeon_master).count()
            if not total:
                return []
            rows = (
                CampaignParticipation._default_manager.db_manager(self.using)
                .filter(campaign__dungeon_master_id=dungeon_master)
                .values(username=F('character__player_id'))
                .annotate(attended=Count('campaign', distinct=True))
                .filter(attended=total)
                .order_by('username')
            )
            return [row['username'] for row in rows]


class MilestoneRepository(Repository):
    model = CampaignMilestone

    def insert(self, campaign_id, milestone):
        if not Campaign._default_manager.db_manager(self.using).filter(pk=campaign_id).exists():
            raise NotFoundError(detail=f"Campaign {campaign_id} not found")
        return self.create(campaign_id=campaign_id, milestone=milestone)

    def get(self, milestone_id):
        return self.fetch(pk=milestone_id)

    def get_all_for(self, campaign_id):
        with self.storage("Milestone list"):
            return list(
                self.objects.filter(campaign_id=campaign_id).values_list('milestone', flat=True)
            )

    def update(self, milestone_id, milestone):
        self.change({'pk': milestone_id}, {'milestone': milestone})
        return self.get(milestone_id)

    def delete(self, milestone_id):
        self.remove(pk=milestone_id)


class StatsRepository:
    """Global counters served on the public stats route."""

    def __init__(self, using='default'):
        self.using = using

    def _manager(self, model):
        return model._default_manager.db_manager(self.using)

    def _most_common(self, field):
        row = (
            self._manager(Character)
            .exclude(**{field: ''})
            .values(field)
            .annotate(total=Count('id'))
            .order_by('-total', field)
            .first()
        )
        return row[field] if row else None

    def get_all(self):
        try:
            characters = self._manager(Character).aggregate(
                count=Count('id'),
                average_level=Avg('level'),
                highest_level=Max('level'),
            )
            return {
                'player_count': self._manager(Player).count(),
                'character_count': characters['count'],
                'campaign_count': self._manager(Campaign).count(),
                'spell_count': self._manager(Spell).count(),
                'item_count': self._manager(Item).count(),
                'average_character_level': (
                    round(characters['average_level'], 2)
                    if characters['average_level'] is not None else None
                ),
                'highest_character_level': characters['highest_level'],
                'most_popular_class': self._most_common('character_class'),
                'most_popular_race': self._most_common('race'),
            }
        except DatabaseError as exc:
            raise StorageError(detail=f"Stats: {exc}") from exc
