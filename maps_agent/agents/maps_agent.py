"""Main maps agent."""

from agent_framework import ChatAgent
from agent_framework.openai import OpenAIChatClient
from openai import AsyncOpenAI

from maps_agent.config import settings
from maps_agent.tools import places_text_search, routes_optimize


SYSTEM_INSTRUCTIONS = """You are a driving route assistant.

## Process
1. `places_text_search` for every place the user names without coordinates
2. If a search is not `resolved`, list the candidates and ask the user which one they mean
   (areas such as cities or postal codes are too coarse to route to)
3. `routes_optimize` with origin, destination and the remaining stops as waypoints

## Key Rule
Never invent coordinates. Only route between points returned by `places_text_search`
or given explicitly by the user.

## Output
List the stops in the optimized order with the distance and driving time of each leg,
then the totals. Mention any warnings returned by the tool.
"""


def create_maps_agent(
    github_token: str | None = None,
    model_id: str | None = None,
    use_ollama: bool = False,
) -> ChatAgent:
    """
    Create and configure the maps agent.

    Args:
        github_token: GitHub personal access token for model access.
                     Falls back to GITHUB_TOKEN environment variable.
        model_id: Model to use. Falls back to MODEL_ID env var or defaults to gpt-4.1
        use_ollama: If True, use local Ollama instead of GitHub Models.
                   Can also be set via USE_OLLAMA=true environment variable.

    Returns:
        Configured ChatAgent instance
    """
    use_ollama = use_ollama or settings.use_ollama

    if use_ollama:
        # Local Ollama setup
        ollama_url = settings.ollama_url
        model = model_id or settings.ollama_model_id

        openai_client = AsyncOpenAI(
            base_url=ollama_url,
            api_key="ollama",  # Ollama doesn't need a real key
        )
    else:
        # GitHub Models setup
        token = github_token or settings.github_token
        if not token:
            raise ValueError(
                "GitHub token is required. Set GITHUB_TOKEN environment variable "
                "or pass github_token parameter. Get a token at: "
                "https://github.com/settings/tokens"
            )

        model = model_id or settings.model_id

        openai_client = AsyncOpenAI(
            base_url="https://models.github.ai/inference",
            api_key=token,
        )

    chat_client = OpenAIChatClient(
        async_client=openai_client,
        model_id=model,
    )

    return ChatAgent(
        chat_client=chat_client,
        name="MapsAgent",
        instructions=SYSTEM_INSTRUCTIONS,
        tools=[
            places_text_search,
            routes_optimize,
        ],
    )
