"""Root test configuration: sample site fixture and session-level cleanup of runtime artifacts"""

from pathlib import Path

import pytest


_PROJECT_ROOT = Path(__file__).parent.parent

_CLEANUP_FILES = ["mdimport.db", "test.db"]


ABOUT_MD = """\
---
title: About us
slug: about
parent: /
nav_position: 2
seo:
  title: About us - Bella Vista
  description: Who we are and what we cook
---

Intro text that belongs to no block.

<!-- CE: header -->

# Welcome to Bella Vista

<!-- CE: textmedia, image: placeholder://team.jpg, position: right -->

## Our story

Since 2005 we serve **seasonal** food.

<!-- CE: text, subtype: bullets -->

## Values

- Quality
- Freshness
- Service

<!-- CE: quote -->

> "The best restaurant in town!"
> — Maria S., regular guest
"""

SITE = {
    "home.md": """\
---
title: Home
slug: /
parent: ""
nav_position: 1
---

<!-- CE: header -->

# Welcome
""",
    "about.md": ABOUT_MD,
    "team.md": """\
---
title: Team
slug: about/team
parent: /about
nav_position: 3
---

<!-- CE: text -->

## Kitchen

Our chefs.
""",
    "history.md": """\
---
title: History
slug: about/history
parent: /about
nav_position: 4
---

<!-- CE: text -->

Founded in 2005.
""",
    "contact.md": """\
---
title: Contact
slug: contact
parent: /
nav_position: 5
---

<!-- CE: text, subtype: table -->

## Opening hours

| Day | Hours |
|-----|-------|
| Mon-Fri | 11-22 |
| Sat | 12-23 |
""",
    "imprint.md": """\
---
title: Imprint
slug: imprint
parent: /
---

<!-- CE: text -->

Bella Vista GmbH
""",
}


@pytest.fixture(name="site_dir")
def site_dir_fixture(tmp_path):
    """A directory holding the sample restaurant site (6 pages, 2 levels)."""
    site = tmp_path / "site"
    site.mkdir()
    for name, text in SITE.items():
        (site / name).write_text(text, encoding="utf-8")
    (site / "notes.txt").write_text("not markdown")
    return site


@pytest.fixture(scope="session", autouse=True)
def cleanup_artifacts():
    """Remove DB files created in the project root during the test session."""
    yield
    for name in _CLEANUP_FILES:
        p = _PROJECT_ROOT / name
        if p.exists():
            p.unlink()
