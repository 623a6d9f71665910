"""Flask server previewing the carousel against a deployed API."""

import os

from flask import Flask, Response, render_template, url_for

from .builder import page_context
from .config import API_URL_ENV_VAR, DEFAULT_INTERVAL_MS, INTERVAL_ENV_VAR, SiteConfig
from .photos import load_photos

app = Flask(__name__)
app.config["GALLERY_API_URL"] = os.environ.get(API_URL_ENV_VAR, "")
app.config["SLIDE_INTERVAL_MS"] = int(os.environ.get(INTERVAL_ENV_VAR, DEFAULT_INTERVAL_MS))


@app.route("/")
def index() -> Response | str:
  """Render the carousel with photos fetched server-side."""
  try:
    config = SiteConfig(
      api_base_url=app.config["GALLERY_API_URL"],
      slide_interval_ms=app.config["SLIDE_INTERVAL_MS"],
    )
  except ValueError as e:
    return Response(f"Preview is not configured: {e}", status=500, mimetype="text/plain")

  photos = load_photos(config.api_base_url)
  app.logger.info("Rendering %d slides", len(photos))
  return render_template(
    "index.html",
    **page_context(
      config,
      photos=photos,
      prefetched=True,
      script_url=url_for("static", filename="carousel.js"),
    ),
  )


if __name__ == "__main__":
  app.run(host="127.0.0.1", port=int(os.environ.get("PORT", "5000")), debug=True)
