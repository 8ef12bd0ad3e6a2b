"""Member id allocator use case."""

from __future__ import annotations

from collections import Counter
from typing import Sequence

from replicaset.domain.exceptions import ValidationError
from replicaset.domain.members import Member


class MemberIdAllocator:
    """Assigns stable member ids to a desired member list.

    Resolution order:
    1. A desired member whose address matches an existing member takes
       that member's id. Any id the caller set is ignored, so a live
       node's identity is never reassigned.
    2. A remaining member with an explicit id keeps it, unless another
       member already holds that id.
    3. Every remaining member with id 0 gets one more than the highest id
       in use across existing and already-resolved members, in order.

    This is a stateless, pure logic component.
    """

    def allocate(
        self, existing: Sequence[Member], desired: Sequence[Member]
    ) -> list[Member]:
        """Resolve ids for a desired member list.

        Args:
            existing: Members of the current config (may be empty).
            desired: Members to submit, in submission order.

        Returns:
            The desired members, in the same order, with ids resolved.

        Raises:
            ValidationError: If two desired members share an address, or
                an explicit id collides with an id already resolved.
        """
        self.check_unique_addresses(desired)

        existing_ids = {member.address: member.id for member in existing}
        resolved: list[Member | None] = [None] * len(desired)
        used: set[int] = set()

        for index, member in enumerate(desired):
            if member.address in existing_ids:
                member_id = existing_ids[member.address]
                resolved[index] = member.with_id(member_id)
                used.add(member_id)

        for index, member in enumerate(desired):
            if resolved[index] is not None or member.id == 0:
                continue
            if member.id in used:
                raise ValidationError(
                    f"member id {member.id} for {member.address} "
                    "conflicts with another member"
                )
            resolved[index] = member
            used.add(member.id)

        highest = max([m.id for m in existing] + list(used), default=0)
        for index, member in enumerate(desired):
            if resolved[index] is None:
                highest += 1
                resolved[index] = member.with_id(highest)

        return [member for member in resolved if member is not None]

    @staticmethod
    def check_unique_addresses(members: Sequence[Member]) -> None:
        """Reject a member list that names the same address twice.

        Raises:
            ValidationError: If any address appears more than once.
        """
        counts = Counter(member.address for member in members)
        duplicates = sorted(address for address, n in counts.items() if n > 1)
        if duplicates:
            raise ValidationError(
                f"duplicate member addresses: {', '.join(duplicates)}"
            )
