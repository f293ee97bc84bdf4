"""
Unit tests for the RSVP parsing strategies and the extraction pipeline.
"""
import pytest
from unittest.mock import Mock

from config.settings import ParserConfig
from rsvp_sync.rsvp_parser.base import address_from_sender
from rsvp_sync.rsvp_parser.structured import StructuredParser
from rsvp_sync.rsvp_parser.natural_language import NaturalLanguageParser
from rsvp_sync.rsvp_parser.form_notification import FormNotificationParser
from rsvp_sync.rsvp_parser.pipeline import ExtractionPipeline
from rsvp_sync.utils.models import RsvpRecord

SCENARIO_A = "Name: Jane Okoro\nEmail: jane@x.com\nCelebrating: Ada Okafor\nNotes: Vegan"
SCENARIO_B = "Hi, I'm Femi Bello and I'll be attending to celebrate Bola Ahmed."
SCENARIO_C = "hello there,\nlooking forward to it!\nsee you soon\n-- sent from my phone"
SCENARIO_E = "New submission from Contact Form\nname: Kola Ade\nemail: kola@x.com"


class TestAddressFromSender:

    def test_display_name_and_address(self):
        assert address_from_sender('"Jane Okoro" <jane@x.com>') == "jane@x.com"

    def test_bare_address(self):
        assert address_from_sender("jane@x.com") == "jane@x.com"

    def test_no_address(self):
        assert address_from_sender("Jane Okoro") is None
        assert address_from_sender("") is None


class TestStructuredParser:
    """Test cases for StructuredParser."""

    @pytest.fixture
    def parser(self, parser_config):
        return StructuredParser(parser_config)

    def test_scenario_a(self, parser, received_at):
        record = parser.parse(SCENARIO_A, "Other <other@y.com>", received_at)

        assert record.name == "Jane Okoro"
        assert record.email == "jane@x.com"
        assert record.celebrating == "Ada Okafor"
        assert record.notes == "Vegan"
        assert record.timestamp == received_at
        assert record.source == "structured"

    def test_email_falls_back_to_sender(self, parser, received_at):
        record = parser.parse("Name: Kola Ade", '"Kola Ade" <kola@x.com>', received_at)

        assert record.email == "kola@x.com"

    def test_email_label_without_address_falls_back_to_sender(self, parser, received_at):
        record = parser.parse("Name: Kola Ade\nEmail: n/a", "kola@x.com", received_at)

        assert record.email == "kola@x.com"

    def test_email_value_with_display_name(self, parser, received_at):
        record = parser.parse("Name: Jane Okoro\nEmail: Jane <jane@x.com>", "", received_at)

        assert record.email == "jane@x.com"

    def test_synonym_labels(self, parser, received_at):
        body = "Guest Name: Tunde Bakare\nE-mail: tunde@x.com\nAttending for: Chidi Obi\nComments: Arriving late"

        record = parser.parse(body, "", received_at)

        assert record.name == "Tunde Bakare"
        assert record.email == "tunde@x.com"
        assert record.celebrating == "Chidi Obi"
        assert record.notes == "Arriving late"

    def test_missing_name_returns_record_with_empty_name(self, parser, received_at):
        record = parser.parse("Email: jane@x.com", "", received_at)

        assert isinstance(record, RsvpRecord)
        assert record.name == ""
        assert not record.is_usable

    def test_optional_fields_left_absent(self, parser, received_at):
        record = parser.parse("Name: Jane Okoro", "", received_at)

        assert record.email is None
        assert record.celebrating is None
        assert record.notes is None

    def test_try_parse_requires_name(self, parser, make_message):
        assert parser.try_parse(make_message("Email: jane@x.com")) is None
        assert parser.try_parse(make_message(SCENARIO_A)).name == "Jane Okoro"

    def test_custom_synonyms(self, received_at):
        config = ParserConfig()
        config.field_synonyms["name"] = ["attendee"]
        parser = StructuredParser(config)

        assert parser.parse("Attendee: Jane Okoro", "", received_at).name == "Jane Okoro"
        assert parser.parse("Name: Jane Okoro", "", received_at).name == ""


class TestNaturalLanguageParser:
    """Test cases for NaturalLanguageParser."""

    @pytest.fixture
    def parser(self, parser_config):
        return NaturalLanguageParser(parser_config)

    def test_scenario_b(self, parser, received_at):
        record = parser.parse(SCENARIO_B, "RSVP", "Femi <femi@x.com>", received_at)

        assert record.name == "Femi Bello"
        assert record.celebrating == "Bola Ahmed"
        assert record.notes == "Extracted from email body"
        assert record.email == "femi@x.com"
        assert record.source == "natural_language"

    def test_i_am_variant(self, parser, received_at):
        record = parser.parse("Hello! I am Femi Bello, count me in.", "", "", received_at)

        assert record.name == "Femi Bello"

    def test_curly_apostrophe(self, parser, received_at):
        record = parser.parse("Hi, I’m Femi Bello.", "", "", received_at)

        assert record.name == "Femi Bello"

    def test_intro_anchor_is_case_insensitive(self, parser, received_at):
        record = parser.parse("hi i'm Femi Bello, see you there", "", "", received_at)

        assert record.name == "Femi Bello"

    def test_name_tokens_must_be_capitalized(self, parser, received_at):
        assert parser.parse("hey, i'm femi bello, see you there", "", "", received_at) is None

    def test_my_name_is(self, parser, received_at):
        record = parser.parse("Good evening, my name is Tunde Bakare.", "", "", received_at)

        assert record.name == "Tunde Bakare"

    def test_intro_wins_over_my_name_is(self, parser, received_at):
        body = "My name is Tunde Bakare. Actually I'm Femi Bello replying for him."

        assert parser.parse(body, "", "", received_at).name == "Femi Bello"

    def test_signature_line(self, parser, received_at):
        body = "Thanks for the invite!\nWe will be there.\n\nCheers,\nTunde Bakare\n\n"

        record = parser.parse(body, "", "", received_at)

        assert record.name == "Tunde Bakare"

    def test_signature_only_in_last_five_lines(self, parser, received_at):
        body = "Tunde Bakare\none\ntwo\nthree\nfour\nfive"

        assert parser.parse(body, "", "", received_at) is None

    def test_trailing_blank_lines_fill_signature_window(self, parser, received_at):
        body = "Thanks\nTunde Bakare\n\n\n\n\n\n"

        assert parser.parse(body, "", "", received_at) is None

    def test_signature_first_matching_line_wins(self, parser, received_at):
        body = "See you soon\nTunde Bakare\nLagos Office"

        assert parser.parse(body, "", "", received_at).name == "Tunde Bakare"

    def test_signature_line_must_be_exactly_two_words(self, parser, received_at):
        body = "See you soon\nTunde Bakare Jr\nthanks"

        assert parser.parse(body, "", "", received_at) is None

    def test_celebrants_in_roster_order(self, parser, received_at):
        body = "I'm Femi Bello. Happy birthday to bola ahmed and ADA OKAFOR!"

        record = parser.parse(body, "", "", received_at)

        assert record.celebrating == "Ada Okafor, Bola Ahmed"

    def test_no_celebrant_leaves_field_absent(self, parser, received_at):
        record = parser.parse("I'm Femi Bello, see you there", "", "", received_at)

        assert record.celebrating is None

    def test_empty_roster_never_matches(self, received_at):
        parser = NaturalLanguageParser(ParserConfig(celebrants=()))

        assert parser.parse(SCENARIO_B, "", "", received_at).celebrating is None

    def test_email_from_sender_not_body(self, parser, received_at):
        body = "I'm Femi Bello, reach me at femi@body.com"

        record = parser.parse(body, "", "Femi <femi@sender.com>", received_at)

        assert record.email == "femi@sender.com"

    def test_no_name_returns_none(self, parser, received_at):
        assert parser.parse(SCENARIO_C, "RSVP", "x@y.com", received_at) is None


class TestFormNotificationParser:
    """Test cases for FormNotificationParser."""

    @pytest.fixture
    def parser(self, parser_config):
        return FormNotificationParser(parser_config)

    def test_scenario_e(self, parser, received_at):
        record = parser.parse(SCENARIO_E, "forms@service.com", received_at)

        assert record is not None
        assert record.name == "Kola Ade"
        assert record.email == "kola@x.com"
        assert record.source == "form_notification"

    def test_service_name_marker(self, parser, received_at):
        body = "You received a Formspree message\nName: Kola Ade"

        assert parser.parse(body, "", received_at).name == "Kola Ade"

    def test_guard_rejects_other_bodies(self, parser, received_at):
        assert parser.parse("Name: Kola Ade\nEmail: kola@x.com", "", received_at) is None

    def test_form_without_name_returns_none(self, parser, received_at):
        assert parser.parse("New submission from Contact Form\nemail: kola@x.com", "", received_at) is None

    def test_delegates_to_structured_parser(self, parser_config, received_at):
        structured = Mock()
        structured.parse.return_value = RsvpRecord(name="Kola Ade", email="kola@x.com")
        parser = FormNotificationParser(parser_config, structured)

        record = parser.parse(SCENARIO_E, "s@x.com", received_at)

        structured.parse.assert_called_once_with(SCENARIO_E, "s@x.com", received_at)
        assert record.name == "Kola Ade"


class TestExtractionPipeline:
    """Test cases for ExtractionPipeline."""

    @pytest.fixture
    def pipeline(self, parser_config):
        return ExtractionPipeline.default(parser_config)

    def test_default_order(self, pipeline):
        names = [strategy.name for strategy in pipeline.strategies]

        assert names == ["structured", "natural_language", "form_notification"]

    def test_scenario_a_uses_structured(self, pipeline, make_message):
        record = pipeline.extract(make_message(SCENARIO_A))

        assert record.source == "structured"
        assert (record.name, record.email, record.celebrating, record.notes) == (
            "Jane Okoro", "jane@x.com", "Ada Okafor", "Vegan"
        )

    def test_structured_result_wins_over_prose(self, pipeline, parser_config, make_message):
        body = "I'm Femi Bello.\nName: Jane Okoro\nNotes: bringing cake"
        message = make_message(body)

        record = pipeline.extract(message)
        expected = StructuredParser(parser_config).parse(body, message.sender, message.received_at)

        assert record == expected

    def test_scenario_b_uses_natural_language(self, pipeline, make_message):
        record = pipeline.extract(make_message(SCENARIO_B, sender="femi@x.com"))

        assert record.source == "natural_language"
        assert record.name == "Femi Bello"
        assert record.celebrating == "Bola Ahmed"
        assert record.notes == "Extracted from email body"

    def test_scenario_c_returns_none(self, pipeline, make_message):
        assert pipeline.extract(make_message(SCENARIO_C)) is None

    def test_scenario_e_yields_usable_record(self, pipeline, make_message):
        record = pipeline.extract(make_message(SCENARIO_E))

        assert record.is_usable
        assert record.name == "Kola Ade"
        assert record.email == "kola@x.com"

    def test_short_circuits_on_first_success(self, make_message):
        first = Mock(name="first")
        first.try_parse.return_value = None
        second = Mock(name="second")
        second.try_parse.return_value = RsvpRecord(name="Jane Okoro", source="second")
        third = Mock(name="third")

        record = ExtractionPipeline([first, second, third]).extract(make_message("body"))

        assert record.source == "second"
        first.try_parse.assert_called_once()
        third.try_parse.assert_not_called()

    def test_skips_records_without_name(self, make_message):
        blank = Mock()
        blank.name = "blank"
        blank.try_parse.return_value = RsvpRecord(name="   ")
        good = Mock()
        good.name = "good"
        good.try_parse.return_value = RsvpRecord(name=" Jane Okoro ")

        record = ExtractionPipeline([blank, good]).extract(make_message("body"))

        assert record.name == "Jane Okoro"
        assert record.source == "good"

    def test_stamps_timestamp_from_message(self, make_message, received_at):
        strategy = Mock()
        strategy.name = "stub"
        strategy.try_parse.return_value = RsvpRecord(name="Jane Okoro")

        record = ExtractionPipeline([strategy]).extract(make_message("body"))

        assert record.timestamp == received_at

    def test_strategy_errors_propagate(self, make_message):
        strategy = Mock()
        strategy.try_parse.side_effect = RuntimeError("regex exploded")

        with pytest.raises(RuntimeError):
            ExtractionPipeline([strategy]).extract(make_message("body"))

    def test_empty_pipeline_returns_none(self, make_message):
        assert ExtractionPipeline([]).extract(make_message(SCENARIO_A)) is None
