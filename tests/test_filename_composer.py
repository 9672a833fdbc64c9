from adnamer.models.naming import Multiplier, NamingRules
from adnamer.services.filename_composer import FilenameComposer, compose_filename
from adnamer.services.sequence_allocator import SequenceAllocator, parse_sequence


def test_safe_name_follows_convention():
    name = compose_filename(Multiplier.TRIPLE, 7, True, "0", "GetTripleEntriesBefore", 30)
    assert name == "300007.TTS.0.GetTripleEntriesBefore.30sec.mp4"


def test_unsafe_label_omitted_by_default():
    name = compose_filename(Multiplier.EVERGREEN, 1, False, "6", "OnlyGetsExtraEntries", 12)
    assert name == "100001.6.OnlyGetsExtraEntries.12sec.mp4"


def test_explicit_unsafe_marker_and_width():
    rules = NamingRules(unsafe_label="NTTS", sequence_width=4)
    name = compose_filename("0001", 3, False, "9", "LastChance", 45, rules)
    assert name == "00010003.NTTS.9.LastChance.45sec.mp4"


def test_path_separators_are_stripped():
    name = compose_filename(Multiplier.DOUBLE, 2, True, "5/..", "Best/Deal\\Ever", 8)
    assert "/" not in name and "\\" not in name
    assert name == "200002.TTS.5.BestDealEver.8sec.mp4"


def test_composed_name_recovers_sequence():
    composer = FilenameComposer()
    for multiplier, sequence in [(Multiplier.TRIPLE, 7), (Multiplier.EVERGREEN, 123), (Multiplier.END_OF_SWEEPS, 1)]:
        name = composer.compose(multiplier, sequence, True, "0", "Ad", 10)
        assert parse_sequence(multiplier, name) == sequence


def test_composed_names_feed_back_into_allocation():
    composer = FilenameComposer()
    names = [composer.compose(Multiplier.DOUBLE, n, True, "0", "Ad", 10) for n in (1, 2, 3)]
    assert SequenceAllocator(names).allocate(Multiplier.DOUBLE) == 4
