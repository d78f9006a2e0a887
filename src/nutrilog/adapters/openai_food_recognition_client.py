"""OpenAI Responses API client for food recognition."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from nutrilog.services.food_input import FoodRecognitionClient


@dataclass
class OpenAIFoodRecognitionClient(FoodRecognitionClient):
    """Food recognition backed by the OpenAI Responses API."""

    client: AsyncOpenAI
    store: bool = False

    @classmethod
    def create(
        cls, api_key: str, store: bool = False
    ) -> "OpenAIFoodRecognitionClient":
        """Create a recognition client."""
        return cls(client=AsyncOpenAI(api_key=api_key), store=store)

    async def recognize(
        self,
        *,
        model: str,
        instructions: str,
        text: str,
        image_data_url: str | None,
        schema: dict[str, object],
    ) -> str:
        """Call the Responses API with structured outputs and return its text."""
        content: list[dict[str, object]] = [{"type": "input_text", "text": text}]
        if image_data_url:
            content.append({"type": "input_image", "image_url": image_data_url})
        response = await self.client.responses.create(
            model=model,
            instructions=instructions,
            input=[{"role": "user", "content": content}],
            text={
                "format": {
                    "type": "json_schema",
                    "name": "food_recognition",
                    "strict": True,
                    "schema": schema,
                }
            },
            store=self.store,
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return output_text

    async def close(self) -> None:
        await self.client.close()
