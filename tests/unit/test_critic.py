# tests/unit/test_critic.py
import json

from listing_critic.core.ai import apply_area_average, critique, risk_factors
from listing_critic.core.ai.critic import build_prompt, parse_verdict
from listing_critic.schemas.models import PriceIndices
from tests.utils import FakeTextModel, make_record


def test_placeholder_record_has_no_risks():
    assert risk_factors(make_record()) == []


def test_overpriced_record_is_flagged():
    record = make_record().model_copy(update={"indices": PriceIndices(zoopla=400_000, ons=400_000, acadata=400_000)})
    assert risk_factors(record) == ["Property is priced 25% above average valuations"]


def test_poor_value_is_flagged():
    record = apply_area_average(make_record(), 2000.0)
    assert record.value_for_money == 4.0
    assert "Below average value for money score" in risk_factors(record)


def test_prompt_quotes_record_numbers():
    prompt = build_prompt(make_record())
    assert "Address: Main Street, Tiddington, CV37" in prompt
    assert "Price: £500,000" in prompt
    assert "Price per sqm: £5,000/sqm" in prompt
    assert "SDLT: £12,500" in prompt
    assert "Postcode average for this property type: £600,000" in prompt
    assert '"recommendation": "BUY" | "DON\'T_BUY" | "NEUTRAL"' in prompt


def test_parse_verdict():
    text = json.dumps({"analysis": "Overpriced shed.", "recommendation": "DON'T_BUY"})
    assert parse_verdict(text) == ("Overpriced shed.", "DON'T_BUY")
    assert parse_verdict('{"analysis": "Fine.", "recommendation": "MAYBE"}') == ("Fine.", "NEUTRAL")
    assert parse_verdict("  Just prose.  ") == ("Just prose.", "NEUTRAL")


def test_critique_with_model():
    model = FakeTextModel(json.dumps({"analysis": "Solid family home.", "recommendation": "BUY"}))
    verdict = critique(make_record(), model)
    assert verdict.overall_verdict == "Solid family home."
    assert verdict.recommendation == "BUY"
    assert verdict.risk_factors == []
    assert verdict.model_dump(by_alias=True)["overallVerdict"] == "Solid family home."


def test_critique_without_model_is_deterministic_neutral():
    verdict = critique(make_record(), None)
    assert verdict.recommendation == "NEUTRAL"
    assert verdict.overall_verdict.startswith("Main Street, Tiddington, CV37 at £500,000")
    assert critique(make_record(), None) == verdict


def test_critique_survives_model_failure():
    verdict = critique(make_record(), FakeTextModel(exc=RuntimeError("boom")))
    assert verdict.recommendation == "NEUTRAL"
    assert verdict.overall_verdict
