"""Offline fallback responses.

``OFFLINE_PAGE_HTML`` is served verbatim (Hebrew, RTL, inline CSS) when a
navigation fails and nothing is cached; its markup must stay byte-for-byte
identical to what the site has always shown.
"""

from offline_cache.entities import CachedResponse

OFFLINE_TITLE = "אין חיבור לאינטרנט"

OFFLINE_PAGE_HTML = """
        <!DOCTYPE html>
        <html dir="rtl" lang="he">
        <head>
          <meta charset="UTF-8">
          <meta name="viewport" content="width=device-width, initial-scale=1.0">
          <title>אין חיבור לאינטרנט - דוקטור פיקס</title>
          <style>
            body { 
              font-family: 'Heebo', Arial, sans-serif; 
              text-align: center; 
              padding: 50px; 
              background: #f8fafc;
              color: #1e293b;
            }
            .offline-container {
              max-width: 400px;
              margin: 0 auto;
              padding: 40px;
              background: white;
              border-radius: 12px;
              box-shadow: 0 4px 6px rgba(0,0,0,0.1);
            }
            .offline-icon {
              font-size: 48px;
              margin-bottom: 20px;
            }
            .retry-btn {
              background: #3b82f6;
              color: white;
              border: none;
              padding: 12px 24px;
              border-radius: 6px;
              cursor: pointer;
              margin-top: 20px;
            }
            .retry-btn:hover {
              background: #2563eb;
            }
          </style>
        </head>
        <body>
          <div class="offline-container">
            <div class="offline-icon">📡</div>
            <h1>אין חיבור לאינטרנט</h1>
            <p>נראה שאין חיבור לאינטרנט. אנא בדוק את החיבור ונסה שוב.</p>
            <button class="retry-btn" onclick="window.location.reload()">נסה שוב</button>
          </div>
        </body>
        </html>
      """

OFFLINE_STATUS = 503


def offline_page_response() -> CachedResponse:
    """Full offline notice for HTML navigations."""
    return CachedResponse.text_response(
        OFFLINE_PAGE_HTML,
        status=OFFLINE_STATUS,
        content_type="text/html; charset=utf-8",
    )


def offline_response() -> CachedResponse:
    """Plain ``Offline`` response for everything that is not a navigation."""
    return CachedResponse.text_response("Offline", status=OFFLINE_STATUS)
