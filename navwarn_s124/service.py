"""Produce S-124 GML for messages, with the checks a publishing service applies."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional, Union

from .config import Settings
from .errors import MessageNotFoundError, ValidationError
from .gml import Dataset
from .mapper import DatasetInfo, DatasetMapper
from .marshaller import CONTENT_TYPE, NumberFormat, marshal
from .model import MainType, Message

logger = logging.getLogger(__name__)

__all__ = ["CONTENT_TYPE", "S124Service"]


class S124Service:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        messages: Optional[Union[Mapping[str, Message], Iterable[Message]]] = None,
        number_format: Optional[NumberFormat] = None,
    ):
        self.settings = settings or Settings()
        self.mapper = DatasetMapper(self.settings)
        self.number_format = number_format
        self.messages = {}
        if isinstance(messages, Mapping):
            self.messages.update({str(k): v for k, v in messages.items()})
        else:
            for m in messages or []:
                for key in (m.id, m.short_id):
                    if key is not None:
                        self.messages[str(key)] = m

    def find_message(self, message_id: Union[str, int]) -> Message:
        message = self.messages.get(str(message_id).strip())
        if message is None:
            raise MessageNotFoundError(f"Message {message_id} not found")
        return message

    def check_supported(self, message: Message) -> None:
        if message.main_type == MainType.NM:
            raise ValidationError("S-124 does not currently support Notices to Mariners")
        if message.number is None:
            raise ValidationError(
                "S-124 does not currently support un-numbered navigational warnings"
            )

    def generate_dataset(self, message: Message, language: Optional[str] = None) -> Dataset:
        self.check_supported(message)
        lang = self.settings.resolve_language(language)
        info = DatasetInfo.for_messages(self.settings, [message])
        return self.mapper.map(info, message, lang)

    def generate_gml(self, message: Message, language: Optional[str] = None) -> str:
        dataset = self.generate_dataset(message, language)
        logger.info("Generated S-124 dataset %s for message %s", dataset.id, message.id)
        return marshal(dataset, number_format=self.number_format)

    def generate_gml_for_id(self, message_id: Union[str, int], language: Optional[str] = None) -> str:
        """Look up a message by numeric or short id and render it.

        Raises MessageNotFoundError (status 404) for unknown ids and
        ValidationError (status 400) for messages S-124 cannot express.
        """
        return self.generate_gml(self.find_message(message_id), language)
