from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from quotebook.forms import Password, form_embed, form_field


@dataclass
class Quote:
    time: Optional[datetime] = form_field(None, name="Time", show=False)
    who_said: str = form_field(
        "",
        name="WhoSaidTheSillyThing",
        label="Who said the silly thing?",
    )
    what_said: str = form_field(
        "",
        name="WhatSillyThingDidTheySay",
        label="What silly thing did they say?",
        widget="textarea",
    )


@dataclass
class AddQuoteForm:
    quote: Quote = form_embed(Quote)
    password: Password = form_field(
        Password(""),
        name="WhatIsThePassword",
        label="What is the password?",
        help="If you don't know this, then you don't belong here.",
        validators=["password"],
    )
