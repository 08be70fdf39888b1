import pytest

from api.exceptions import AuthError, ConflictError, NotFoundError, ValidationError
from api.models import Campaign, CampaignParticipation, Character, Item, Player, Spell

pytestmark = pytest.mark.django_db


class TestPlayerRepository:

    def test_register_hashes_password(self, context):
        player = context.players.register("carol", "s3cret", "Carol")

        assert player.password != "s3cret"
        assert context.players.authenticate("carol", "s3cret") == "carol"

    def test_register_duplicate(self, context, alice):
        with pytest.raises(ConflictError):
            context.players.register("alice", "other", "Impostor")

        stored = Player.objects.get(username="alice")
        assert stored.name == "Alice"
        assert stored.check_password("pw1")

    def test_register_rejects_blank_password(self, context):
        with pytest.raises(ValidationError):
            context.players.register("carol", "  ", "Carol")

    def test_authenticate_failures_look_the_same(self, context, alice):
        with pytest.raises(AuthError) as wrong_password:
            context.players.authenticate("alice", "nope")
        with pytest.raises(AuthError) as unknown_user:
            context.players.authenticate("nobody", "nope")

        assert str(wrong_password.value) == str(unknown_user.value)
        assert wrong_password.value.message == unknown_user.value.message

    def test_update_password(self, context, alice, bob):
        context.players.update_password("alice", "fresh")

        assert context.players.authenticate("alice", "fresh") == "alice"
        assert context.players.authenticate("bob", "pw2") == "bob"
        with pytest.raises(AuthError):
            context.players.authenticate("alice", "pw1")

    @pytest.mark.parametrize("password", ["", "   "])
    def test_update_password_rejects_blank(self, context, alice, password):
        with pytest.raises(ValidationError):
            context.players.update_password("alice", password)

    def test_update_password_missing_player(self, context, db):
        with pytest.raises(NotFoundError):
            context.players.update_password("ghost", "whatever")

    def test_delete_cascades(self, context, alice, wizard, fighter):
        context.campaigns.insert("alice", [wizard.id, fighter.id], name="Strahd")

        context.players.delete("alice")

        assert not Player.objects.filter(username="alice").exists()
        assert not Character.objects.filter(pk=wizard.id).exists()
        assert not Campaign.objects.exists()
        assert Character.objects.filter(pk=fighter.id).exists()

    def test_delete_missing_player(self, context, db):
        with pytest.raises(NotFoundError):
            context.players.delete("ghost")


class TestCharacterOwnedRepositories:

    def test_same_spell_name_on_two_characters(self, context, wizard, fighter):
        context.spells.insert(wizard.id, name="Shield", school="Abjuration")
        context.spells.insert(fighter.id, name="Shield", school="Abjuration")

        assert Spell.objects.filter(name="Shield").count() == 2

    def test_duplicate_spell_on_one_character(self, context, wizard):
        context.spells.insert(wizard.id, name="Shield")

        with pytest.raises(ConflictError):
            context.spells.insert(wizard.id, name="Shield")

    def test_get_spell_is_scoped_to_character(self, context, wizard, fighter):
        context.spells.insert(wizard.id, name="Fireball", school="Evocation")

        assert context.spells.get(wizard.id, "Fireball").school == "Evocation"
        with pytest.raises(NotFoundError):
            context.spells.get(fighter.id, "Fireball")

    def test_update_spell(self, context, wizard):
        context.spells.insert(wizard.id, name="Fireball", level=3)

        spell = context.spells.update(wizard.id, "Fireball", level=5, character_id=12345)

        assert spell.level == 5
        assert spell.character_id == wizard.id

    def test_update_and_delete_missing_item(self, context, wizard):
        with pytest.raises(NotFoundError):
            context.items.update(wizard.id, "Lute", quantity=2)
        with pytest.raises(NotFoundError):
            context.items.delete(wizard.id, "Lute")

    def test_item_stats_on_empty_inventory(self, context, wizard):
        assert context.items.stats(wizard.id) == {
            "item_count": 0,
            "total_quantity": 0,
            "total_weight": 0.0,
            "total_value": 0,
            "heaviest_item": None,
            "most_valuable_item": None,
        }

    def test_item_stats_counts_stacks(self, context, wizard):
        context.items.insert(wizard.id, name="Arrow", quantity=20, weight=0.05, value=1)
        context.items.insert(wizard.id, name="Longbow", quantity=1, weight=2, value=50)

        stats = context.items.stats(wizard.id)

        assert stats["item_count"] == 2
        assert stats["total_quantity"] == 21
        assert stats["total_weight"] == pytest.approx(3.0)
        assert stats["total_value"] == 70
        assert stats["heaviest_item"] == "Longbow"
        assert stats["most_valuable_item"] == "Longbow"
        assert Item.objects.count() == 2


class TestCampaignRepository:

    def test_insert_links_characters(self, context, wizard, fighter):
        campaign = context.campaigns.insert(
            "alice", [wizard.id, fighter.id, wizard.id], name="Strahd", state="Session 0"
        )

        assert campaign.dungeon_master_id == "alice"
        assert CampaignParticipation.objects.filter(campaign=campaign).count() == 2

    def test_insert_rolls_back_on_missing_character(self, context, wizard):
        with pytest.raises(NotFoundError):
            context.campaigns.insert("alice", [wizard.id, 9999], name="Strahd")

        assert not Campaign.objects.exists()
        assert not CampaignParticipation.objects.exists()

    def test_insert_requires_characters(self, context, alice):
        with pytest.raises(ValidationError):
            context.campaigns.insert("alice", [], name="Empty table")

        assert not Campaign.objects.exists()

    def test_players_attended_all_without_campaigns(self, context, alice):
        assert context.campaigns.get_players_attended_all("alice") == []

    def test_players_attended_all(self, context, alice, bob, wizard, fighter):
        bard = context.characters.insert("bob", name="Volo", character_class="Bard")
        first = context.campaigns.insert("alice", [wizard.id, fighter.id], name="One")
        context.campaigns.insert("alice", [bard.id], name="Two")

        # bob attends both through different characters; alice only the first.
        assert context.campaigns.get_players_attended_all("alice") == ["bob"]

        context.campaigns.delete(first.id)
        assert context.campaigns.get_players_attended_all("alice") == ["bob"]

    def test_update_keeps_participants(self, context, wizard):
        campaign = context.campaigns.insert("alice", [wizard.id], name="Strahd")

        updated = context.campaigns.update(campaign.id, "Chapter 3", "Krezk")

        assert updated.state == "Chapter 3"
        assert updated.current_location == "Krezk"
        assert [row["character_id"] for row in context.campaigns.get_participants(campaign.id)] == [wizard.id]

    def test_update_missing_campaign(self, context, db):
        with pytest.raises(NotFoundError):
            context.campaigns.update(9999, "Done", "Nowhere")

    def test_character_campaigns(self, context, wizard, fighter):
        one = context.campaigns.insert("alice", [wizard.id], name="One")
        two = context.campaigns.insert("bob", [wizard.id, fighter.id], name="Two")

        assert context.campaigns.get_all_character_campaigns(wizard.id) == [one, two]
        assert context.campaigns.get_all_character_campaigns(fighter.id) == [two]
        assert context.campaigns.get_all_for("bob") == [two]


class TestMilestoneRepository:

    def test_milestone_lifecycle(self, context, wizard):
        campaign = context.campaigns.insert("alice", [wizard.id], name="Strahd")
        first = context.milestones.insert(campaign.id, "Entered the mists")
        context.milestones.insert(campaign.id, "Reached Vallaki")

        assert context.milestones.get_all_for(campaign.id) == ["Entered the mists", "Reached Vallaki"]

        assert context.milestones.update(first.id, "Entered Barovia").milestone == "Entered Barovia"
        context.milestones.delete(first.id)
        assert context.milestones.get_all_for(campaign.id) == ["Reached Vallaki"]

        with pytest.raises(NotFoundError):
            context.milestones.get(first.id)

    def test_milestone_for_missing_campaign(self, context, db):
        with pytest.raises(NotFoundError):
            context.milestones.insert(9999, "Nothing happens")

    def test_milestones_go_with_their_campaign(self, context, wizard):
        campaign = context.campaigns.insert("alice", [wizard.id], name="Strahd")
        context.milestones.insert(campaign.id, "Entered the mists")

        context.campaigns.delete(campaign.id)

        assert context.milestones.get_all_for(campaign.id) == []


class TestStatsRepository:

    def test_counts(self, context, wizard, fighter):
        context.spells.insert(wizard.id, name="Shield")
        context.items.insert(fighter.id, name="Warhammer")
        context.campaigns.insert("alice", [wizard.id, fighter.id], name="Strahd")

        stats = context.stats.get_all()

        assert stats["player_count"] == 2
        assert stats["character_count"] == 2
        assert stats["campaign_count"] == 1
        assert stats["spell_count"] == 1
        assert stats["item_count"] == 1
        assert stats["highest_character_level"] == 5
        assert stats["most_popular_race"] == "Dwarf"
