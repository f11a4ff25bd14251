from typing import Any

from pydantic import BaseModel, Field, model_validator


class ParseRequest(BaseModel):
    text: str = Field(
        ...,
        examples=["Black shirt | category: Shirts | price: 25000 | stock: 10"],
        description="Pasted product list: one product per line, CSV or JSON.",
    )
    format: str = Field(default="auto", examples=["auto", "text", "json", "csv"])
    auto_fix: bool = Field(default=True)
    enhance: bool = Field(default=False, description="Fill in descriptions, tags and suggested sizes.")
    file_name: str | None = Field(default=None)


class ProductInput(BaseModel):
    name: str = ""
    category: str = ""
    price: float | str = 0
    stock: int | str = 0
    sku: str | None = None
    description: str | None = None
    long_description: str | None = None
    active: bool = True
    sizes: list[str] | None = None
    stock_by_size: dict[str, int] | None = None
    colors: list[str] | None = None
    tags: list[str] | None = None
    primary_image: str | None = None
    images: list[str] | None = None
    suggested_price: float | None = None

    @model_validator(mode="before")
    @classmethod
    def _compat_camel_case(cls, data: Any) -> Any:
        """Accept the camelCase keys emitted by the parse endpoint."""
        if not isinstance(data, dict):
            return data
        aliases = {
            "longDescription": "long_description",
            "stockBySize": "stock_by_size",
            "primaryImage": "primary_image",
            "secondaryImages": "images",
            "suggestedPrice": "suggested_price",
        }
        for camel, snake in aliases.items():
            if camel in data and snake not in data:
                data[snake] = data.pop(camel)
        return data


class BulkCreateRequest(BaseModel):
    products: list[ProductInput] = Field(default_factory=list)
    file_name: str | None = Field(default=None)
