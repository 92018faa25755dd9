"""
HTML rendering for the finished card page.
"""

ATTRIBUTION = "Art and text produced by an AI at Alphajot.com"


def format_to_html(message: str) -> str:
    """Turn newline-delimited text into paragraphs.

    Each newline alternately opens and closes a <p> tag, so model output of the
    form "\\ncontent\\n\\ncontent\\n" becomes "<p>content</p><p>content</p>".
    Double quotes are dropped so the result can sit inside an attribute value.
    """
    rebuilt = []
    close_tag = False
    for ch in message or "":
        if ch == "\n":
            rebuilt.append("</p>" if close_tag else "<p>")
            close_tag = not close_tag
        elif ch != '"':
            rebuilt.append(ch)
    return "".join(rebuilt)


def format_result(image_url: str, message_html: str) -> str:
    """Full result page with the card and the hidden confirmation form."""
    return (
        '<!DOCTYPE html><html><head><title>New Card</title><meta charset="UTF-8"/>'
        '<meta name="viewport" content="width=device-width,initial-scale=1"/>'
        '<link rel="stylesheet" type="text/css" href="css/stylesheet.css">'
        '</head><body><div><h1><a href="/" style="text-decoration: none; color: black;">Alphajot</a></h1></div>'
        f'<form action="/ConfirmCard" method="post"><img class="card" src="{image_url}"><br>'
        '<div class="card"><div class="greeting">'
        f"<p>{message_html}</p>"
        f'<p class="attribution">{ATTRIBUTION}</p></div></div>'
        '<br><br><div><input class="emailbar" id="email" name="email" placeholder="Recipient Email Address"><br><br>'
        '<button id="sendbutton" class="sendbutton" type="submit">Send!</button>'
        f'<input type="hidden" name="img" value="{image_url}">'
        f'<input type="hidden" name="msg" value="{message_html}"></div>'
        '</form><script src="js/validate.js"></script></body></html>'
    )
