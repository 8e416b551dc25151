"""Phrase banks for countdown narration.

Each entry is a (template, glyph) pair. Templates carry an ``{e}`` slot where
the glyph goes; the glyph text includes its own spacing so that a script
rendered without emojis has no stray whitespace. Intro and outro templates
also take ``{topic}``; default bodies take ``{title}``.
"""

# Intros: ``{topic}`` is " <topic>" or " clips"
INTROS = {
    "energetic": [
        ("What's up everyone!{e} Welcome back to the channel. Today we're counting down the top 5{topic} that absolutely blew our minds. Let's get into it!", " 🔥"),
        ("Hey there!{e} You're about to see the most incredible{topic} ranked from number 5 all the way to number 1. Trust me, you don't want to miss the top spot!", " 👋"),
        ("Welcome to today's countdown!{e} We've got 5 amazing{topic} to show you, and I guarantee number 1 will leave you speechless. Let's go!", " 🎬"),
    ],
    "casual": [
        ("Hey, what's going on? So today I'm ranking the top 5{topic}. Let's see what we've got.", ""),
        ("Alright, so I put together my top 5{topic} for you. Let me know if you agree with this list.", ""),
        ("Hey everyone. Today we're looking at my top 5{topic}. Some of these might surprise you.", ""),
    ],
    "professional": [
        ("Welcome. Today we present a curated selection of the top 5{topic}, ranked for your consideration.", ""),
        ("In this presentation, we'll be examining the top 5{topic}, carefully selected and ranked.", ""),
        ("Thank you for joining us. Today's countdown features the top 5{topic} in our collection.", ""),
    ],
}

_ENERGETIC_GLYPHS = {5: "🔹 ", 4: "🔸 ", 3: "🥉 ", 2: "🥈 ", 1: "🥇 "}

RANK_INTROS = {
    "energetic": {
        5: ["{e}Kicking things off at number 5...", "{e}Starting our countdown at number 5, we have...", "{e}Coming in at number 5 to get us started..."],
        4: ["{e}Moving up to number 4...", "{e}At number 4, things are heating up...", "{e}Sliding into the number 4 spot..."],
        3: ["{e}Now we're getting serious! At number 3...", "{e}The bronze medal goes to number 3...", "{e}Claiming the number 3 spot..."],
        2: ["{e}So close to the top! At number 2...", "{e}The runner-up at number 2...", "{e}Just barely missing the top spot, at number 2..."],
        1: ["{e}And finally, the moment you've been waiting for! Number 1 is...", "{e}The undisputed champion at number 1...", "{e}Taking the crown at number 1, we have..."],
    },
    "casual": {
        5: ["At number 5...", "Starting off at 5...", "Kicking us off..."],
        4: ["Number 4...", "Moving to 4...", "At 4 we have..."],
        3: ["Now at number 3...", "The 3 spot goes to...", "Coming in at 3..."],
        2: ["Almost at the top, number 2...", "Just missing first, at 2...", "The runner-up..."],
        1: ["And number 1...", "Taking the top spot...", "My number 1 pick..."],
    },
    "professional": {
        5: ["Beginning at position five...", "In fifth position...", "Our fifth entry..."],
        4: ["At position four...", "Moving to fourth place...", "Fourth in our ranking..."],
        3: ["In third position...", "Our bronze placement...", "At number three..."],
        2: ["In second position...", "Our silver placement...", "Taking second place..."],
        1: ["Our top selection...", "In first position...", "The leading entry..."],
    },
}

GENERIC_RANK_INTRO = "At number {rank}..."

DEFAULT_BODIES = {
    "energetic": {
        5: [
            "This one kicks off our list perfectly. {title} sets the bar high right from the start!",
            "A solid entry to begin our countdown. {title} shows us what we're working with!",
        ],
        4: [
            "Now we're talking! {title} really impressed us and earned this spot.",
            "Things are getting better. {title} brings the heat at number 4!",
        ],
        3: [
            "This is where it gets competitive. {title} is absolutely top-tier content!",
            "On the podium at number 3! {title} definitely deserves this recognition.",
        ],
        2: [
            "So incredibly close to the top! {title} is absolutely phenomenal. Any other day, this could've been number 1!",
            "The runner-up is no joke. {title} had us on the edge of our seats!",
        ],
        1: [
            "The champion! {title} blew everything else out of the water. This is peak content right here!",
            "Absolutely unbeatable! {title} earned this spot and then some. Simply incredible!",
        ],
    },
    "casual": {
        5: ["{title} is a good starting point.", "Solid pick with {title}."],
        4: ["{title} is really good.", "I liked {title} a lot."],
        3: ["{title} is excellent.", "Really impressed by {title}."],
        2: ["{title} almost took the top spot.", "So close! {title} is amazing."],
        1: ["{title} is my favorite.", "Had to give it to {title}. The best!"],
    },
    "professional": {
        5: ["{title} demonstrates notable qualities that merit inclusion."],
        4: ["{title} exhibits commendable attributes worthy of recognition."],
        3: ["{title} stands out with exceptional merit and quality."],
        2: ["{title} presents outstanding characteristics, narrowly missing first."],
        1: ["{title} exemplifies the highest standard in this category."],
    },
}

GENERIC_BODY = "An impressive entry that deserves recognition."

OUTROS = {
    "energetic": [
        ("And that wraps up our top 5!{e} If you enjoyed this countdown, smash that like button and subscribe for more content like this. Drop a comment below telling me which one was YOUR favorite. See you in the next one!", " 🙌"),
        ("There you have it, folks! The ultimate top 5.{e} Did your favorite make the list? Let me know in the comments! Don't forget to like and subscribe if you want more countdowns. Peace!", " 💯"),
        ("What a list!{e} If you made it this far, you're a real one. Hit that subscribe button and turn on notifications so you never miss a countdown. Until next time!", " 🔥"),
    ],
    "casual": [
        ("So that's my top 5. Let me know in the comments what you think. See you next time.", ""),
        ("That's the list. Would love to hear your thoughts. Thanks for watching.", ""),
        ("And that's it! Hope you enjoyed. Leave a comment with your picks.", ""),
    ],
    "professional": [
        ("This concludes our presentation of the top 5 selections. We welcome your feedback and comments.", ""),
        ("Thank you for your attention. We hope you found this ranking informative and engaging.", ""),
        ("This concludes our ranking. We appreciate your viewership and welcome your perspectives.", ""),
    ],
}


def rank_intro_glyph(style: str, rank: int) -> str:
    """Glyph shown before a rank intro (energetic style only)."""
    if style != "energetic":
        return ""
    return _ENERGETIC_GLYPHS.get(rank, "")
