# grocery/repos/address_repo.py
from sqlalchemy import case, func, select, update
from sqlalchemy.orm import Session

from grocery.data.models.address import AddressModel


class AddressRepo:
    """
    Address persistence. Methods flush but never commit; AddressService owns
    the transaction so clearing the old default and writing the new one land
    together.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_owned(self, address_id: int, user_id: int) -> AddressModel | None:
        return self.db.execute(
            select(AddressModel).where(AddressModel.id == address_id, AddressModel.user_id == user_id)
        ).scalar_one_or_none()

    def list_for_user(self, user_id: int) -> list[AddressModel]:
        return list(
            self.db.execute(
                select(AddressModel)
                .where(AddressModel.user_id == user_id)
                .order_by(AddressModel.is_default.desc(), AddressModel.created_at.desc(), AddressModel.id.desc())
            ).scalars()
        )

    def count_for_user(self, user_id: int) -> int:
        return self.db.execute(
            select(func.count(AddressModel.id)).where(AddressModel.user_id == user_id)
        ).scalar_one()

    def add(self, address: AddressModel) -> AddressModel:
        self.db.add(address)
        self.db.flush()
        return address

    def clear_default(self, user_id: int, except_id: int | None = None) -> None:
        stmt = update(AddressModel).where(AddressModel.user_id == user_id, AddressModel.is_default.is_(True))
        if except_id is not None:
            stmt = stmt.where(AddressModel.id != except_id)
        self.db.execute(stmt.values(is_default=False).execution_options(synchronize_session="fetch"))

    def set_default(self, address_id: int, user_id: int) -> None:
        """Flip every default flag of the user in one conditional statement."""
        self.db.execute(
            update(AddressModel)
            .where(AddressModel.user_id == user_id)
            .values(is_default=case((AddressModel.id == address_id, True), else_=False))
            .execution_options(synchronize_session="fetch")
        )

    def delete(self, address: AddressModel) -> None:
        self.db.delete(address)
        self.db.flush()
