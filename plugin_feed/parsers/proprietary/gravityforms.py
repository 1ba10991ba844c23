"""
Gravity Forms feed configuration.

Gravity Forms announces releases on its blog; only posts titled
"Gravity Forms vX.Y Released" are releases.
"""

from ..feed import FeedSource

GRAVITY_FORMS = FeedSource(
    title='Gravity Forms',
    description=(
        'Gravity Forms for WordPress is a full featured contact form plugin that '
        'features a drag and drop interface, advanced notification routing, lead '
        'capture, conditional logic fields, multi-page forms, pricing calculations '
        'and the ability to create posts from external forms.'
    ),
    image={
        'uri': 'https://gravityforms.s3.amazonaws.com/logos/gravityforms_logo_100.png',
        'height': 100,
        'width': 116,
    },
    url='https://www.gravityhelp.com/feed/atom/',
    link='https://www.gravityforms.com/',
    pattern=r'^Gravity Forms v[\d.]+ Released',
)
