from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class FeedModel(BaseModel):
    """Base for records derived from the stats feed.

    Python attributes are snake_case; the persisted JSON keeps the camelCase
    shape produced by key normalization. Fields the feed sends that are not
    declared on a model are kept as-is.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        coerce_numbers_to_str=True,
    )

    def to_document(self) -> dict:
        """JSON-ready dict in the persisted camelCase shape.

        Only fields that were actually supplied are written, so an upstream
        null stays null and an unset colour stays absent.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)
