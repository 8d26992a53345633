import pytest

from delivery_reconciler.model import QuantitySet
from delivery_reconciler.quantities import (
    DEFAULT_MARKERS,
    UnitMarker,
    order_markers,
    tokenize_quantities,
)


# --------------------------------------------------------------------
# MARKER ORDERING
# --------------------------------------------------------------------
def test_cup_not_read_as_large():
    quantities = tokenize_quantities("3cup + 2large")
    assert quantities.cup == 3
    assert quantities.large == 2
    assert quantities.small == 0


def test_arabic_cup_marker_tried_before_large_marker():
    quantities = tokenize_quantities("3كوب + 2ك")
    assert quantities.cup == 3
    assert quantities.large == 2


def test_longer_markers_sorted_first():
    markers = [m.marker for m in order_markers(DEFAULT_MARKERS)]
    assert markers.index("كوب") < markers.index("ك")
    assert markers.index("صغير") < markers.index("ص")
    assert markers.index("cups") < markers.index("cup")


# --------------------------------------------------------------------
# TOKENIZING
# --------------------------------------------------------------------
def test_compound_arabic_fragment():
    quantities = tokenize_quantities("12ص + 8ك + 2كوب")
    assert quantities == QuantitySet(small=12, large=8, variant=0, cup=2)


def test_repeated_codes_are_summed():
    assert tokenize_quantities("5ص + 3 ص").small == 8


def test_full_word_markers():
    quantities = tokenize_quantities("4 صغير و 6 كبير")
    assert quantities.small == 4
    assert quantities.large == 6


def test_variant_markers():
    assert tokenize_quantities("2 فو").variant == 2
    assert tokenize_quantities("4V00").variant == 4


def test_arabic_indic_digits():
    assert tokenize_quantities("٣ص").small == 3


@pytest.mark.parametrize("text", ["", None, "no markers here 42", "5 larger", "10 كيس"])
def test_no_quantities(text):
    assert tokenize_quantities(text) == QuantitySet()
    assert tokenize_quantities(text).total == 0


def test_custom_marker_table():
    quantities = tokenize_quantities("4 bags", [UnitMarker("bags", "SMALL")])
    assert quantities.small == 4


def test_unknown_code_rejected():
    with pytest.raises(ValueError):
        UnitMarker("box", "BOX")
