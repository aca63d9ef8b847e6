"""
用戶相關 Schema

定義用戶資料、登入與註冊表單的驗證模型。
表單驗證失敗時不會發出任何網路請求。
"""

from datetime import date

from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator

from stockdesk.schemas.stock import Holding

# 出生日期可選範圍下限
MIN_BIRTH_DATE = date(1900, 1, 1)
ADULT_AGE = 18


class User(BaseModel):
    """目前登入的用戶（後端回傳的紀錄）"""
    id: str = Field(alias="_id")
    name: str
    email: str
    stocks: list[Holding] | None = None

    model_config = {"populate_by_name": True, "extra": "allow"}

    def to_storage(self) -> str:
        """序列化為寫入本地儲存的 JSON，僅保留後端實際給的欄位"""
        return self.model_dump_json(by_alias=True, exclude_unset=True)


def is_adult(birth_date: date, today: date | None = None) -> bool:
    """
    檢查是否年滿 18 歲。

    以年份差與月份差判斷，不比較日期：
    年份差大於 18，或恰為 18 且當月已過出生月份即視為成年。
    """
    today = today or date.today()
    age = today.year - birth_date.year
    month_diff = today.month - birth_date.month
    return age > ADULT_AGE or (age == ADULT_AGE and month_diff >= 0)


class LoginForm(BaseModel):
    """登入表單"""
    email: EmailStr
    password: str = Field(min_length=6)


class RegisterData(BaseModel):
    """送往後端的註冊資料"""
    name: str
    email: str
    password: str
    date_of_birth: date = Field(alias="dateOfBirth")
    address: str

    model_config = {"populate_by_name": True}


class RegisterForm(BaseModel):
    """註冊表單"""
    name: str = Field(min_length=2)
    email: EmailStr
    address: str = Field(min_length=5)
    password: str = Field(min_length=6)
    confirm_password: str
    date_of_birth: date

    @field_validator("date_of_birth")
    @classmethod
    def check_birth_date(cls, value: date) -> date:
        if value > date.today() or value < MIN_BIRTH_DATE:
            raise ValueError("出生日期不在允許範圍內")
        if not is_adult(value):
            raise ValueError("必須年滿 18 歲")
        return value

    @field_validator("confirm_password")
    @classmethod
    def check_passwords_match(cls, value: str, info: ValidationInfo) -> str:
        # password 驗證失敗時不會出現在 info.data
        password = info.data.get("password")
        if password is not None and value != password:
            raise ValueError("兩次輸入的密碼不一致")
        return value

    def to_payload(self) -> RegisterData:
        """轉換為後端註冊請求資料（不含確認密碼）"""
        return RegisterData(
            name=self.name,
            email=self.email,
            password=self.password,
            date_of_birth=self.date_of_birth,
            address=self.address,
        )


class SessionInfo(BaseModel):
    """目前登入狀態"""
    user: User | None = None
    is_logged_in: bool
    loading: bool
    greeting: str | None = None
