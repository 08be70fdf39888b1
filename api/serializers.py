"""
API Serializers for Draco.

Input serializers validate request bodies before anything reaches a
repository; output serializers shape model instances for the response
envelope. Ownership fields (player, dungeon master, character) are always
read-only: the views fill them from the token or the URL, never from the body.
"""

from rest_framework import serializers

from .models import Campaign, Character, Item, Player, Spell


class PlayerSerializer(serializers.ModelSerializer):
    """Public view of a player. The password hash never leaves the server."""

    class Meta:
        model = Player
        fields = ['username', 'name']
        read_only_fields = fields


class PlayerRegistrationSerializer(serializers.Serializer):
    """
    Registration body. A plain Serializer rather than a ModelSerializer so the
    duplicate-username check happens in the credential store, not here.
    """
    username = serializers.CharField(max_length=150)
    # Stored exactly as sent so that login, which does not trim, matches it.
    password = serializers.CharField(
        write_only=True, trim_whitespace=False, style={'input_type': 'password'}
    )
    name = serializers.CharField(max_length=150)

    def create(self, validated_data):
        raise NotImplementedError("Registration goes through the player repository.")

    def update(self, instance, validated_data):
        raise NotImplementedError("Registration goes through the player repository.")


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(trim_whitespace=False, style={'input_type': 'password'})

    def create(self, validated_data):
        raise NotImplementedError("Login does not create anything.")

    def update(self, instance, validated_data):
        raise NotImplementedError("Login does not update anything.")


class PasswordChangeSerializer(serializers.Serializer):
    """
    Password change for the logged-in player. Both values are trimmed;
    emptiness and the confirmation match are checked by the view, which
    answers them with different status codes.
    """
    new_password = serializers.CharField(required=False, allow_blank=True, default='')
    confirmation = serializers.CharField(required=False, allow_blank=True, default='')

    def create(self, validated_data):
        raise NotImplementedError("This serializer is for password change only.")

    def update(self, instance, validated_data):
        raise NotImplementedError("This serializer is for password change only.")


class CharacterSerializer(serializers.ModelSerializer):
    player_username = serializers.CharField(source='player_id', read_only=True)

    class Meta:
        model = Character
        fields = [
            'id',
            'player_username',
            'name',
            'race',
            'character_class',
            'level',
            'alignment',
            'background',
            'hit_points',
            'armor_class',
            'strength',
            'dexterity',
            'constitution',
            'intelligence',
            'wisdom',
            'charisma',
        ]
        read_only_fields = ['id', 'player_username']


class SpellSerializer(serializers.ModelSerializer):
    character_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Spell
        fields = [
            'character_id',
            'name',
            'school',
            'level',
            'casting_time',
            'range',
            'components',
            'duration',
            'description',
        ]
        # Per-character uniqueness is enforced by the database.
        validators = []


class ItemSerializer(serializers.ModelSerializer):
    character_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Item
        fields = [
            'character_id',
            'name',
            'item_type',
            'quantity',
            'weight',
            'value',
            'description',
        ]
        validators = []


class CampaignSerializer(serializers.ModelSerializer):
    dungeon_master = serializers.CharField(source='dungeon_master_id', read_only=True)

    class Meta:
        model = Campaign
        fields = ['id', 'name', 'current_location', 'state', 'dungeon_master']
        read_only_fields = ['id', 'dungeon_master']


class CampaignCreationSerializer(serializers.Serializer):
    """
    Body of POST /auth/campaign: the campaign itself plus the ids of the
    characters taking part. At least one character is required.
    """
    campaign = CampaignSerializer()
    character_id = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        allow_empty=False,
    )

    def create(self, validated_data):
        raise NotImplementedError("Campaigns are created through the campaign repository.")

    def update(self, instance, validated_data):
        raise NotImplementedError("Campaigns are created through the campaign repository.")


class CampaignUpdateSerializer(serializers.Serializer):
    state = serializers.CharField(max_length=100, allow_blank=True)
    location = serializers.CharField(max_length=100, allow_blank=True)

    def create(self, validated_data):
        raise NotImplementedError("This serializer is for campaign updates only.")

    def update(self, instance, validated_data):
        raise NotImplementedError("This serializer is for campaign updates only.")


class MilestoneSerializer(serializers.Serializer):
    milestone = serializers.CharField()

    def create(self, validated_data):
        raise NotImplementedError("Milestones are created through the milestone repository.")

    def update(self, instance, validated_data):
        raise NotImplementedError("Milestones are created through the milestone repository.")


class CampaignParticipantSerializer(serializers.Serializer):
    character_id = serializers.IntegerField()
    character_name = serializers.CharField()
    player_username = serializers.CharField()
    player_name = serializers.CharField()


class SpellSchoolCountSerializer(serializers.Serializer):
    school = serializers.CharField(allow_blank=True)
    count = serializers.IntegerField()


class ItemStatsSerializer(serializers.Serializer):
    item_count = serializers.IntegerField()
    total_quantity = serializers.IntegerField()
    total_weight = serializers.FloatField()
    total_value = serializers.IntegerField()
    heaviest_item = serializers.CharField(allow_null=True)
    most_valuable_item = serializers.CharField(allow_null=True)


class StatsSerializer(serializers.Serializer):
    player_count = serializers.IntegerField()
    character_count = serializers.IntegerField()
    campaign_count = serializers.IntegerField()
    spell_count = serializers.IntegerField()
    item_count = serializers.IntegerField()
    average_character_level = serializers.FloatField(allow_null=True)
    highest_character_level = serializers.IntegerField(allow_null=True)
    most_popular_class = serializers.CharField(allow_null=True)
    most_popular_race = serializers.CharField(allow_null=True)
