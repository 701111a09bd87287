from __future__ import annotations

from jobboard.utils.sanitize import sanitize_input


def test_strings_are_trimmed_and_escaped() -> None:
    assert sanitize_input("  <b>Acme & Co</b>  ") == "&lt;b&gt;Acme &amp; Co&lt;/b&gt;"


def test_quotes_are_escaped_but_slashes_are_kept() -> None:
    assert sanitize_input('say "hi" it\'s https://a.example/b') == (
        "say &quot;hi&quot; it&#x27;s https://a.example/b"
    )


def test_nested_structures_are_walked() -> None:
    value = {
        "bio": " <script>x</script> ",
        "skills": ["<i>python</i>", "sql"],
        "years": 3,
        "links": {"github": "https://github.com/jane"},
    }
    assert sanitize_input(value) == {
        "bio": "&lt;script&gt;x&lt;/script&gt;",
        "skills": ["&lt;i&gt;python&lt;/i&gt;", "sql"],
        "years": 3,
        "links": {"github": "https://github.com/jane"},
    }


def test_non_string_leaves_pass_through() -> None:
    assert sanitize_input(None) is None
    assert sanitize_input(4.5) == 4.5
    assert sanitize_input(True) is True


def test_url_fields_keep_ampersands_but_lose_markup() -> None:
    value = {
        "website": " https://acme.example.com/jobs?team=api&level=2 ",
        "logo": 'https://cdn.example.com/a.png"><script>',
        "description": "R&D",
    }
    assert sanitize_input(value) == {
        "website": "https://acme.example.com/jobs?team=api&level=2",
        "logo": "https://cdn.example.com/a.png%22%3E%3Cscript%3E",
        "description": "R&amp;D",
    }


def test_list_items_inherit_the_url_field() -> None:
    assert sanitize_input({"resume": ["https://files.example.com/cv.pdf?v=1&dl=1"]}) == {
        "resume": ["https://files.example.com/cv.pdf?v=1&dl=1"],
    }
    assert sanitize_input("https://files.example.com/cv.pdf?v=1&dl=1", "resume") == (
        "https://files.example.com/cv.pdf?v=1&dl=1"
    )
