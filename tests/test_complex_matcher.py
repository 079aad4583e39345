import pytest

from valuation.models.geo import ApartmentComplex
from valuation.services.complex_matcher import ComplexMatcher, score_match


def matcher(*complexes):
    return ComplexMatcher([
        ApartmentComplex(id=id, name_uk=uk, name_ru=ru) for id, uk, ru in complexes
    ])


def test_prefixed_name_in_title():
    m = matcher((1, "ЖК Файна Таун", "ЖК Файна Таун"))
    found = m.find_complex_in_text("Продаж 2к квартири в ЖК «Файна Таун», вул. Слобожанська")
    assert found.complex_id == 1
    assert found.complex_name == "ЖК Файна Таун"
    assert "файна таун" in found.matched_text
    # full length + title zone; the quote sits between prefix and name
    assert found.score == pytest.approx(0.8)


def test_prefix_bonus_caps_at_one():
    m = matcher((1, "Файна Таун", None))
    found = m.find_complex_in_text("ЖК Файна Таун, 2 кімнати")
    assert found.score == pytest.approx(1.0)


def test_russian_name_matches():
    m = matcher((4, "Сонячна Брама", "Солнечные Ворота"))
    found = m.find_complex_in_text("Продам квартиру в жилой комплекс Солнечные Ворота")
    assert found.complex_id == 4


def test_partial_hit_far_from_title_is_rejected():
    m = matcher((1, "Файна Таун Парк", None))
    text = "Продаж квартири. " + "Опис " * 30 + "поруч файна таун та школа"
    assert m.find_complex_in_text(text) is None


def test_min_score_is_configurable():
    m = matcher((1, "Файна Таун Парк", None))
    text = "Продаж квартири. " + "Опис " * 30 + "поруч файна таун та школа"
    found = m.find_complex_in_text(text, min_score=0.3)
    assert found.complex_id == 1
    assert found.score == pytest.approx(0.4)


def test_longer_name_wins_ties():
    m = matcher((1, "Комфорт", None), (2, "Комфорт Таун", None))
    found = m.find_complex_in_text("Продаж квартири в ЖК Комфорт Таун")
    assert found.complex_id == 2


def test_higher_score_beats_earlier_complex():
    m = matcher((1, "Парковий Квартал Новий", None), (2, "Липки", None))
    found = m.find_complex_in_text("ЖК Липки, поруч парковий квартал")
    assert found.complex_id == 2


def test_short_names_are_ignored():
    m = matcher((1, "ЖК А", "Б"))
    assert len(m) == 0
    assert m.find_complex_in_text("ЖК А, квартира") is None


@pytest.mark.parametrize("text", [None, "", "   ", "Квартира біля метро"])
def test_no_match(text):
    m = matcher((1, "Файна Таун", None))
    assert m.find_complex_in_text(text) is None


def test_score_match_without_bonuses():
    text = "x" * 120 + " файна таун"
    assert score_match("файна таун", "файна таун", text) == pytest.approx(0.6)
