from django.contrib.auth.models import AbstractBaseUser, BaseUserManager
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone


class PlayerManager(BaseUserManager):
    """
    Manager for the Player model, required when using a custom user model.
    """

    def create_player(self, username, password, name='', **extra_fields):
        """Creates and saves a Player with the given username, password and display name."""
        if not username:
            raise ValueError('The Username field must be set')
        player = self.model(username=username, name=name, **extra_fields)
        player.set_password(password)
        player.save(using=self._db, force_insert=True)
        return player

    def get_by_natural_key(self, username):
        return self.get(username=username)


class Player(AbstractBaseUser):
    """
    A registered player. The username is the identity key and never changes
    once the account exists.
    """
    username = models.CharField(max_length=150, primary_key=True)
    name = models.CharField(max_length=150)

    objects = PlayerManager()

    USERNAME_FIELD = 'username'
    REQUIRED_FIELDS = ['name']

    class Meta:
        db_table = 'player'
        verbose_name = 'Player'
        verbose_name_plural = 'Players'

    def __str__(self):
        return self.username


ABILITY_SCORE_VALIDATORS = [MinValueValidator(1), MaxValueValidator(30)]


class Character(models.Model):
    """
    A player character. Spells and items hang off the character; campaigns
    pick characters up through CampaignParticipation.
    """
    player = models.ForeignKey(
        Player,
        on_delete=models.CASCADE,
        related_name='characters',
        db_column='player_username',
    )
    name = models.CharField(max_length=100)
    race = models.CharField(max_length=50, blank=True)
    character_class = models.CharField(max_length=50, blank=True)
    level = models.PositiveSmallIntegerField(
        default=1,
        validators=[MinValueValidator(1), MaxValueValidator(20)]
    )
    alignment = models.CharField(max_length=30, blank=True)
    background = models.CharField(max_length=100, blank=True)
    hit_points = models.IntegerField(default=0)
    armor_class = models.IntegerField(default=10)

    strength = models.PositiveSmallIntegerField(default=10, validators=ABILITY_SCORE_VALIDATORS)
    dexterity = models.PositiveSmallIntegerField(default=10, validators=ABILITY_SCORE_VALIDATORS)
    constitution = models.PositiveSmallIntegerField(default=10, validators=ABILITY_SCORE_VALIDATORS)
    intelligence = models.PositiveSmallIntegerField(default=10, validators=ABILITY_SCORE_VALIDATORS)
    wisdom = models.PositiveSmallIntegerField(default=10, validators=ABILITY_SCORE_VALIDATORS)
    charisma = models.PositiveSmallIntegerField(default=10, validators=ABILITY_SCORE_VALIDATORS)

    class Meta:
        db_table = 'character'

    def __str__(self):
        return self.name


class Spell(models.Model):
    """
    A spell known by a character. Names are unique per character only, so two
    characters can both know "Fireball".
    """
    character = models.ForeignKey(Character, on_delete=models.CASCADE, related_name='spells')
    name = models.CharField(max_length=100)
    school = models.CharField(max_length=50, blank=True)
    level = models.PositiveSmallIntegerField(default=0, validators=[MaxValueValidator(9)])
    casting_time = models.CharField(max_length=50, blank=True)
    range = models.CharField(max_length=50, blank=True)
    components = models.CharField(max_length=50, blank=True)
    duration = models.CharField(max_length=50, blank=True)
    description = models.TextField(blank=True)

    class Meta:
        db_table = 'spell'
        constraints = [
            models.UniqueConstraint(fields=['character', 'name'], name='uq_spell_character_name'),
        ]

    def __str__(self):
        return f"{self.name} ({self.character_id})"


class Item(models.Model):
    """
    An item carried by a character, keyed the same way as spells.
    """
    character = models.ForeignKey(Character, on_delete=models.CASCADE, related_name='items')
    name = models.CharField(max_length=100)
    item_type = models.CharField(max_length=50, blank=True)
    quantity = models.PositiveIntegerField(default=1)
    weight = models.FloatField(default=0.0, validators=[MinValueValidator(0.0)])
    value = models.PositiveIntegerField(default=0, help_text="Value in gold pieces.")
    description = models.TextField(blank=True)

    class Meta:
        db_table = 'item'
        constraints = [
            models.UniqueConstraint(fields=['character', 'name'], name='uq_item_character_name'),
        ]

    def __str__(self):
        return f"{self.name} x{self.quantity} ({self.character_id})"


class Campaign(models.Model):
    """
    A campaign run by a dungeon master. The dungeon master is set once at
    creation; characters join through CampaignParticipation.
    """
    name = models.CharField(max_length=100)
    current_location = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    dungeon_master = models.ForeignKey(
        Player,
        on_delete=models.CASCADE,
        related_name='campaigns',
        db_column='dungeon_master',
    )
    characters = models.ManyToManyField(
        Character,
        through='CampaignParticipation',
        related_name='campaigns',
    )

    class Meta:
        db_table = 'campaign'

    def __str__(self):
        return self.name


class CampaignParticipation(models.Model):
    """Links a character to a campaign it has joined."""
    campaign = models.ForeignKey(Campaign, on_delete=models.CASCADE, related_name='participations')
    character = models.ForeignKey(Character, on_delete=models.CASCADE, related_name='participations')
    joined_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'belongs_to'
        constraints = [
            models.UniqueConstraint(fields=['campaign', 'character'], name='uq_belongs_to_campaign_character'),
        ]

    def __str__(self):
        return f"Character {self.character_id} in campaign {self.campaign_id}"


class CampaignMilestone(models.Model):
    campaign = models.ForeignKey(Campaign, on_delete=models.CASCADE, related_name='milestones')
    milestone = models.TextField()
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'campaign_milestone'
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"Milestone for campaign {self.campaign_id}: {self.milestone[:40]}"
