"""
Text generation through Amazon Bedrock.

Only used to paraphrase the advisory narrative. Callers treat every failure
as "use the fixed fallback text", so this module raises a single
GenerationError type and never retries beyond botocore's bounded policy.
"""

import json
import os
import time
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError, BotoCoreError

from logging_config import get_logger, log_aws_service_call

logger = get_logger(__name__)

DEFAULT_MODEL_ID = "anthropic.claude-3-haiku-20240307-v1:0"


class GenerationError(Exception):
    """Raised when the text-generation call fails or returns nothing usable."""
    pass


class BedrockTextGenerator:
    """
    ``generate(prompt) -> str`` over bedrock-runtime ``invoke_model`` with an
    Anthropic messages body.
    """

    def __init__(
        self,
        model_id: Optional[str] = None,
        region: Optional[str] = None,
        timeout_seconds: float = 8.0,
        max_tokens: int = 300,
        temperature: float = 0.3,
        client=None,
    ):
        self.model_id = model_id or os.getenv("BEDROCK_INFERENCE_PROFILE_ARN") or os.getenv(
            "BEDROCK_MODEL", DEFAULT_MODEL_ID
        )
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._client = client or boto3.client(
            "bedrock-runtime",
            region_name=region or os.getenv("BEDROCK_REGION", "us-east-1"),
            config=Config(
                connect_timeout=timeout_seconds,
                read_timeout=timeout_seconds,
                retries={"max_attempts": 1},
            ),
        )

    def generate(self, prompt: str) -> str:
        body = json.dumps({
            "anthropic_version": "bedrock-2023-05-31",
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
        })

        start_time = time.time()
        try:
            response = self._client.invoke_model(
                modelId=self.model_id,
                body=body,
                accept="application/json",
                contentType="application/json",
            )
            response_json = json.loads(response["body"].read())
        except (ClientError, BotoCoreError, ValueError) as e:
            log_aws_service_call(
                logger, service="bedrock", operation="invoke_model", success=False,
                duration_ms=(time.time() - start_time) * 1000, error=e,
                extra={"model_id": self.model_id},
            )
            raise GenerationError(f"Bedrock invocation failed: {e}") from e

        log_aws_service_call(
            logger, service="bedrock", operation="invoke_model", success=True,
            duration_ms=(time.time() - start_time) * 1000,
            extra={"model_id": self.model_id},
        )

        text = "".join(
            block.get("text", "")
            for block in response_json.get("content", [])
            if block.get("type", "text") == "text"
        ).strip()
        if not text:
            raise GenerationError("Bedrock returned an empty completion")
        return text
