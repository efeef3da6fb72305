from typing import Optional

from pydantic import BaseModel, ConfigDict


class CheckoutStrategy(BaseModel):
    """One ref to try during version selection.

    With create_branch set, the ref is checked out as a new local branch of
    the same name (`git checkout -b <ref> <ref>`).
    """

    model_config = ConfigDict(frozen=True)

    name: str
    ref: str
    create_branch: bool = False

    def __str__(self) -> str:
        suffix = " (new branch)" if self.create_branch else ""
        return f"{self.name}: {self.ref}{suffix}"


class CheckoutResult(BaseModel):
    ok: bool
    strategy: Optional[CheckoutStrategy] = None
