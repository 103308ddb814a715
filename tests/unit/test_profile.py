from __future__ import annotations

from bs4 import BeautifulSoup

from portfolio_chat.core import profile
from portfolio_chat.core.profile import (
    NO_PROFILE_CONTEXT,
    PortfolioPage,
    gather_profile_context,
    load_resume,
)

PDF_TEXT = (
    "ACADEMIC QUALIFICATIONS • M.Tech AI, NMIMS • B.E. Computer "
    "EXPERIENCE • ML Intern at Acme building detection pipelines for traffic cameras "
    "PROJECTS • Resume Chatbot • Sign Detector "
    "SKILLS • Python, C++ "
    "CERTIFICATIONS • TensorFlow Developer "
    "ACHIEVEMENTS • Smart India Hackathon finalist"
)

PAGE = """
<section id="about"><p class="about-text">I build ML systems.</p></section>
<section id="projects">
  <div class="project-card"><h3>Resume Bot</h3><p>Recruiter Q&amp;A</p></div>
  <div class="project-card"><h3>Sign Detector</h3><p>Real-time CV</p></div>
</section>
<section id="skills"><h2>Skills</h2><p>Python, C++</p></section>
<section id="achievements"><h3>AWS CCP</h3><p>Amazon</p><ul><li>Hackathon finalist</li></ul></section>
"""


def _write(path, text: str) -> str:
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_load_resume_fallback_only(tmp_path) -> None:
    resume, sources = load_resume(
        str(tmp_path / "none.pdf"),
        str(tmp_path / "none.html"),
        owner_name="Jane Doe",
        owner_summary="Engineer",
    )
    assert sources == []
    assert resume["name"] == "Jane Doe"
    assert resume["summary"] == "Engineer"
    for key in profile.LIST_KEYS:
        assert resume[key] == []


def test_load_resume_pdf_then_html(tmp_path, monkeypatch) -> None:
    pdf_path = tmp_path / "resume.pdf"
    pdf_path.write_bytes(b"%PDF-1.4\n")
    monkeypatch.setattr(profile, "extract_pdf_text", lambda _path: PDF_TEXT)
    html_path = _write(tmp_path / "index.html", PAGE)

    resume, sources = load_resume(
        str(pdf_path), html_path, owner_name="Jane Doe", owner_summary="Engineer"
    )

    assert sources == ["PDF", "Portfolio HTML"]
    assert resume["summary"] == "I build ML systems."
    # no education cards on the page, so PDF academic entries are used
    assert resume["education"] == [
        {"degree": "M.Tech AI, NMIMS", "details": ""},
        {"degree": "B.E. Computer", "details": ""},
    ]
    assert resume["projects"][:2] == ["Resume Chatbot", "Sign Detector"]
    assert resume["projects"][2] == {"name": "Resume Bot", "details": ["Recruiter Q&A"]}
    assert resume["certifications"] == ["TensorFlow Developer", "AWS CCP - Amazon"]
    assert resume["achievements"] == ["Smart India Hackathon finalist", "Hackathon finalist"]
    assert resume["skills"] == ["Python", "C++"]


def test_short_pdf_text_is_skipped(tmp_path, monkeypatch) -> None:
    pdf_path = tmp_path / "resume.pdf"
    pdf_path.write_bytes(b"%PDF-1.4\n")
    monkeypatch.setattr(profile, "extract_pdf_text", lambda _path: "EDUCATION • too short")

    resume, sources = load_resume(
        str(pdf_path), str(tmp_path / "none.html"), owner_name="Jane", owner_summary="x"
    )
    assert sources == []
    assert resume["education"] == []


def test_gather_profile_context_orders_sections() -> None:
    context = gather_profile_context(BeautifulSoup(PAGE, "html.parser"), "Jane Doe")
    lines = context.split("\n")

    assert lines[0] == "=== JANE DOE - PROFESSIONAL PROFILE ==="
    assert lines[1] == "I build ML systems."
    assert lines.index("=== PROJECTS ===") < lines.index("=== SKILLS & EXPERTISE ===")
    assert "Resume Bot" in lines
    assert "=== PROFESSIONAL EXPERIENCE ===" in lines
    assert lines[-1] == "Hackathon finalist"
    assert "" not in lines


def test_gather_profile_context_empty_page() -> None:
    assert gather_profile_context(BeautifulSoup("<p>hi</p>", "html.parser"), "Jane") == (
        NO_PROFILE_CONTEXT
    )


def test_portfolio_page_views() -> None:
    page = PortfolioPage.from_html(PAGE, "Jane Doe")
    assert page.about == "I build ML systems."
    assert page.project_names == ["Resume Bot", "Sign Detector"]
    assert page.context.startswith("=== JANE DOE")
