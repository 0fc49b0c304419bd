"""Completion-backed commands."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from chatwarden.commands.contracts import CommandContext, CommandServices, CommandSpec
from chatwarden.core.errors import ConfigurationError, ProviderError


@dataclass(frozen=True, slots=True)
class PromptCommand:
    """One completion-backed command.

    ``temperature``/``max_tokens`` of ``None`` use the configured AI defaults.
    """

    name: str
    feature: str
    usage: str
    prompt: str
    header: str
    failure: str
    temperature: float | None = None
    max_tokens: int | None = None
    requires_args: bool = True


PROMPT_COMMANDS: tuple[PromptCommand, ...] = (
    PromptCommand(
        name="translate",
        feature="Translation feature",
        usage="Usage: {p}translate <text>\nExample: {p}translate Hello world",
        prompt='Translate the following text to English:\n"{args}"\n\nJust respond with the translated text.',
        header="🔤 *Translation*",
        failure="Translation failed. Please try again.",
        temperature=0.3,
        max_tokens=100,
    ),
    PromptCommand(
        name="weather",
        feature="Weather feature",
        usage="Usage: {p}weather <location>\nExample: {p}weather London",
        prompt=(
            "Provide a weather forecast for {args} in simple terms. "
            "Include temperature, conditions, and any important weather alerts."
        ),
        header="🌤️ *Weather Forecast for {args}*",
        failure="Could not retrieve weather information.",
        temperature=0.5,
        max_tokens=150,
    ),
    PromptCommand(
        name="define",
        feature="Dictionary feature",
        usage="Usage: {p}define <word>\nExample: {p}define algorithm",
        prompt='Define the word "{args}" in simple terms with examples.',
        header="📚 *Definition of {args}*",
        failure="Definition not found. Try another word.",
        temperature=0.5,
        max_tokens=150,
    ),
    PromptCommand(
        name="wiki",
        feature="Wikipedia feature",
        usage="Usage: {p}wiki <query>\nExample: {p}wiki artificial intelligence",
        prompt='Provide a concise summary of "{args}" from Wikipedia. Include key facts and important details.',
        header='📚 *Wikipedia Summary for "{args}"*',
        failure="Wikipedia search failed. Please try a different query.",
        temperature=0.5,
        max_tokens=200,
    ),
    PromptCommand(
        name="news",
        feature="News feature",
        usage="",
        prompt=(
            "Fetch and summarize the top 3 current news headlines. "
            "Format them as bullet points with brief descriptions."
        ),
        header="📰 *Latest News*",
        failure="Could not fetch news at this time.",
        temperature=0.5,
        max_tokens=300,
        requires_args=False,
    ),
    PromptCommand(
        name="ai",
        feature="AI feature",
        usage="Usage: {p}ai <query>\nExample: {p}ai What is the capital of France?",
        prompt=(
            "Act as an intelligent assistant. Answer the following question clearly and concisely:\n"
            "Question: {args}\n\n"
            "Provide a helpful response with relevant information."
        ),
        header="🤖 *AI Response*",
        failure="I couldn't process that request. Please try again with a different query.",
    ),
)

CHAT_FAILURE = "I'm having trouble processing that request right now. Please try again later."
CHAT_NOT_CONFIGURED = "AI features are not configured. Please set OPENAI_API_KEY in .env file."


def not_configured(feature: str) -> str:
    return f"{feature} is not configured. Please set OPENAI_API_KEY."


class AICommands:
    """Completion and image-generation commands."""

    def __init__(self, services: CommandServices):
        self._services = services

    def specs(self) -> list[CommandSpec]:
        specs = [CommandSpec(cmd.name, self._prompt_handler(cmd)) for cmd in PROMPT_COMMANDS]
        specs.append(
            CommandSpec(
                "image",
                self.image,
                admin_only=True,
                refusal="Image generation is restricted to admins",
            )
        )
        return specs

    def _prompt_handler(self, cmd: PromptCommand):
        async def handler(ctx: CommandContext) -> str:
            return await self.run_prompt(cmd, ctx)

        return handler

    async def run_prompt(self, cmd: PromptCommand, ctx: CommandContext) -> str:
        prefix = self._services.config.commands.prefix
        if cmd.requires_args and not ctx.args:
            return cmd.usage.format(p=prefix)

        completion = self._services.completion
        if completion is None or not completion.configured:
            return not_configured(cmd.feature)

        ai = self._services.config.ai
        try:
            text = await completion.complete(
                cmd.prompt.format(args=ctx.args),
                temperature=ai.temperature if cmd.temperature is None else cmd.temperature,
                max_tokens=ai.max_tokens if cmd.max_tokens is None else cmd.max_tokens,
            )
        except ConfigurationError:
            return not_configured(cmd.feature)
        except ProviderError as e:
            logger.warning("completion_failed command={} error={}", cmd.name, e)
            return cmd.failure
        return f"{cmd.header.format(args=ctx.args)}\n\n{text}"

    async def image(self, ctx: CommandContext) -> str:
        prefix = self._services.config.commands.prefix
        prompt = ctx.args
        if not prompt:
            return f"Usage: {prefix}image <prompt>\nExample: {prefix}image a cute cat wearing sunglasses"

        completion = self._services.completion
        feature = "Image generation"
        if completion is None or not completion.configured:
            return not_configured(feature)
        try:
            url = await completion.generate_image(prompt)
        except ConfigurationError:
            return not_configured(feature)
        except ProviderError as e:
            logger.warning("image_generation_failed error={}", e)
            return "Sorry, I couldn't generate an image at this time."
        return f"🖼️ *Image Generated*\n\nPrompt: {prompt}\n\nHere's your image:\n{url}"


async def chat_reply(services: CommandServices, body: str, sender: str) -> str:
    """Answer a free-form AI-prefixed chat message."""
    completion = services.completion
    if completion is None or not completion.configured:
        return CHAT_NOT_CONFIGURED
    prompt = (
        "You are a helpful WhatsApp bot assistant.\n"
        f"User: {sender}\n"
        f"Message: {body}\n\n"
        "Please provide a helpful, friendly, and concise response in natural language.\n"
        "Keep responses under 200 characters for WhatsApp."
    )
    ai = services.config.ai
    try:
        return await completion.complete(prompt, temperature=ai.temperature, max_tokens=ai.max_tokens)
    except ConfigurationError:
        return CHAT_NOT_CONFIGURED
    except ProviderError as e:
        logger.warning("chat_completion_failed sender={} error={}", sender, e)
        return CHAT_FAILURE
