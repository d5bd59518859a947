import pytest

from drive_mirror.pipeline.naming import FolderNames, sanitize_name


def test_sanitize_replaces_illegal_characters():
    assert sanitize_name("A/B:C") == "A_B_C"
    assert sanitize_name('a\\b*c?d"e<f>g|h') == "a_b_c_d_e_f_g_h"


@pytest.mark.parametrize("name", ["A/B:C", "plain.txt", "..", "", "x|y", "résumé.pdf"])
def test_sanitize_is_idempotent(name):
    once = sanitize_name(name)
    assert sanitize_name(once) == once


@pytest.mark.parametrize("name", ["", ".", ".."])
def test_sanitize_never_returns_relative_dirs(name):
    assert sanitize_name(name) == "_"


def test_sanitize_keeps_legal_names():
    assert sanitize_name("Report 2024 (final).docx") == "Report 2024 (final).docx"


def test_folder_names_first_claim_wins():
    names = FolderNames()
    assert names.claim("a.txt", "id1") == "a.txt"
    assert names.claim("a.txt", "id2") == "a [id2].txt"
    assert names.claim("b.txt", "id3") == "b.txt"


def test_folder_names_accounts_for_export_extension():
    names = FolderNames()
    assert names.claim("Doc.docx", "real") == "Doc.docx"
    # A native "Doc" exported as Doc.docx must not clobber the real file.
    assert names.claim("Doc", "native", ".docx") == "Doc [native]"


def test_folder_names_without_extension():
    names = FolderNames()
    names.claim("Notes", "a")
    assert names.claim("Notes", "b") == "Notes [b]"


def test_temp_sibling_is_reserved_after_plain_name():
    names = FolderNames()
    assert names.claim("a", "plain") == "a"
    # "a" streams through "a.tmp", so a real "a.tmp" must go elsewhere.
    assert names.claim("a.tmp", "t") == "a [t].tmp"


def test_plain_name_avoids_existing_temp_named_file():
    names = FolderNames()
    assert names.claim("a.tmp", "t") == "a.tmp"
    assert names.claim("a", "plain") == "a [plain]"


def test_temp_reservation_includes_export_extension():
    names = FolderNames(temp_suffix=".part")
    assert names.claim("Doc", "d", ".docx") == "Doc"
    assert names.claim("Doc.docx.part", "x") == "Doc.docx [x].part"
    assert names.claim("Doc.docx.tmp", "y") == "Doc.docx.tmp"
