"""Entertainment commands backed by static content."""

from __future__ import annotations

import random

from chatwarden.commands.contracts import CommandContext, CommandSpec

JOKES = (
    "Why don't scientists trust atoms? Because they make up everything!",
    "What did one ocean say to the other ocean? Nothing, they just waved!",
    "Why did the scarecrow win an award? He was outstanding in his field!",
    "I told my wife she was drawing her eyebrows too high. She looked surprised.",
    "Why did the math book look so sad? Because of all of its problems.",
)

QUOTES = (
    "The only way to do great work is to love what you do. - Steve Jobs",
    "Life is what happens to you while you're busy making other plans. - John Lennon",
    "The future belongs to those who believe in the beauty of their dreams. - Eleanor Roosevelt",
    "Success is not final, failure is not fatal: It is the courage to continue that counts. - Winston Churchill",
    "The best way to predict the future is to create it. - Peter Drucker",
)

FACTS = (
    "Honey never spoils. Archaeologists have found pots of honey in ancient Egyptian tombs "
    "that are over 3,000 years old and still perfectly good to eat.",
    "Octopuses have three hearts. Two pump blood to the gills, while the third pumps it to the rest of the body.",
    "A group of flamingos is called a 'flamboyance'.",
    "Bananas are berries, but strawberries aren't.",
    "The shortest war in history was between Britain and Zanzibar on August 27, 1896. "
    "Zanzibar surrendered after 38 minutes.",
)

HOROSCOPES = {
    "aries": "Today will bring unexpected opportunities. Stay open to new possibilities!",
    "taurus": "Your patience will be rewarded today. Focus on long-term goals.",
    "gemini": "Communication is key today. Reach out to friends and colleagues.",
    "cancer": "Trust your intuition today. It will guide you to the right decisions.",
    "leo": "Your creativity is at its peak. Channel it into your projects.",
    "virgo": "Attention to detail will serve you well today. Double-check your work.",
    "libra": "Balance is important today. Find harmony in your relationships.",
    "scorpio": "Deep insights await you today. Trust your instincts.",
    "sagittarius": "Adventure calls today. Be open to new experiences.",
    "capricorn": "Your hard work is paying off. Stay focused on your goals.",
    "aquarius": "Innovation is your strength today. Think outside the box.",
    "pisces": "Your compassion shines today. Help others and you'll be rewarded.",
}


class FunCommands:
    def __init__(self, *, prefix: str = "!", rng: random.Random | None = None):
        self._prefix = prefix
        self._rng = rng or random.Random()

    def specs(self) -> list[CommandSpec]:
        return [
            CommandSpec("joke", self.joke),
            CommandSpec("quote", self.quote),
            CommandSpec("fact", self.fact),
            CommandSpec("horoscope", self.horoscope),
        ]

    async def joke(self, ctx: CommandContext) -> str:
        return f"🤣 *Joke*\n\n{self._rng.choice(JOKES)}"

    async def quote(self, ctx: CommandContext) -> str:
        return f"💡 *Quote of the Day*\n\n{self._rng.choice(QUOTES)}"

    async def fact(self, ctx: CommandContext) -> str:
        return f"🔍 *Random Fact*\n\n{self._rng.choice(FACTS)}"

    async def horoscope(self, ctx: CommandContext) -> str:
        sign = ctx.args.strip().lower()
        if sign not in HOROSCOPES:
            return f"Please enter a valid zodiac sign. Example: {self._prefix}horoscope leo"
        return f"🌟 *Horoscope for {sign.capitalize()}*\n\n{HOROSCOPES[sign]}"
