"""HTML pages used across extraction, scanning and pipeline tests."""

import json

ARTICLE_BODY = """
<h1>How to Choose a Water Heater</h1>
<p>The short answer is that a tankless water heater is the best choice for most
households that want lower energy bills. Tank models still make sense when the
upfront budget is tight.</p>
<h2>Tank vs. tankless</h2>
<p>A tankless heater warms water on demand and uses about 24% less energy than
a storage tank in a typical home. Storage tanks keep water hot around the clock,
which wastes heat when nobody is using it.</p>
<ul>
  <li>Tankless units last up to 20 years</li>
  <li>Tank units usually last 8 to 12 years</li>
</ul>
<h3>Sizing</h3>
<p>Most families of four need a unit that delivers at least 8 gallons per minute.
Check the flow rate of every fixture before you buy.</p>
<p>See our <a href="/guides/plumbing">plumbing guide</a> or the
<a href="https://www.energy.gov/water-heaters">Department of Energy overview</a>.</p>
<img src="/img/tankless.jpg" alt="A wall-mounted tankless water heater">
"""


def article_page(
    body: str = ARTICLE_BODY,
    title: str = "How to Choose a Water Heater: Tank vs. Tankless Guide",
    description: str = (
        "Compare tank and tankless water heaters by cost, lifespan and energy use, "
        "and learn how to size a unit for your household in a few minutes."
    ),
    lang: str | None = "en",
    head_extra: str = "",
) -> str:
    """Wrap an article body in a complete page with chrome around it."""
    lang_attr = f' lang="{lang}"' if lang else ""
    return f"""<!DOCTYPE html>
<html{lang_attr}>
<head>
  <title>{title}</title>
  <meta name="description" content="{description}">
  <meta property="og:title" content="{title}">
  <link rel="canonical" href="https://www.example.com/water-heaters">
  <script type="application/ld+json">{{"@context": "https://schema.org", "@type": "Article"}}</script>
  <style>body {{ font-family: sans-serif; }}</style>
  {head_extra}
</head>
<body>
  <header><nav><a href="/">Home</a> <a href="/blog">Blog</a></nav></header>
  <article>{body}</article>
  <aside class="sidebar"><p>Subscribe to our newsletter</p></aside>
  <footer><p>Copyright 2024 Example Plumbing</p></footer>
  <script>console.log("tracking");</script>
</body>
</html>"""


ARTICLE_HTML = article_page()

COMPETITOR_HTML = article_page(
    body="""
<h1>Water heaters</h1>
<p>We sell water heaters of every kind. Call us today to talk about your options
and schedule an installation with one of our licensed technicians.</p>
<p>Our team has installed heaters across the region for many years and we are
happy to help you pick one.</p>
""",
    title="Water Heaters",
    description="Water heaters for sale.",
)

EMPTY_SHELL_HTML = """<!DOCTYPE html>
<html lang="en">
<head><title>Loading</title></head>
<body><div id="root"></div><script src="/bundle.js"></script></body>
</html>"""

BLOCKED_HTML = """<!DOCTYPE html>
<html lang="en">
<head><title>Attention Required! | Cloudflare</title></head>
<body>
  <main>
    <h1>Sorry, you have been blocked</h1>
    <p>This website is using a security service to protect itself from online attacks.
    The action you just performed triggered the security solution. Please complete
    the captcha below to continue to the site.</p>
  </main>
</body>
</html>"""


def rewrite_payload(content: str, title: str = "", meta: str = "", changes=None) -> str:
    """Build generation output the way a provider returns it, fenced and chatty."""
    payload = {
        "content": content,
        "title": title,
        "metaDescription": meta,
        "changes": changes or ["Tightened the opening paragraph"],
    }
    return f"Here is the improved content:\n```json\n{json.dumps(payload)}\n```\nLet me know!"
