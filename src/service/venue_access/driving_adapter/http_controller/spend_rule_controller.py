from typing import List

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.shared_kernel.driving_adapter.auth.role_auth import require_staff
from src.service.venue_access.app.command.create_spend_rule_use_case import CreateSpendRuleUseCase
from src.service.venue_access.app.command.toggle_spend_rule_use_case import ToggleSpendRuleUseCase
from src.service.venue_access.app.command.update_spend_rule_use_case import UpdateSpendRuleUseCase
from src.service.venue_access.app.query.list_spend_rules_use_case import ListSpendRulesUseCase
from src.service.venue_access.domain.entity.spend_rule_entity import SpendRule
from src.service.venue_access.driving_adapter.http_controller.schema.spend_rule_schema import (
    SpendRuleCreateRequest,
    SpendRuleResponse,
    SpendRuleToggleRequest,
    SpendRuleUpdateRequest,
)


router = APIRouter()


def _rule_response(rule: SpendRule) -> SpendRuleResponse:
    if rule.id is None:
        raise ValueError('Spend rule ID should not be None after creation.')
    return SpendRuleResponse(
        id=rule.id,
        venue_id=rule.venue_id,
        name=rule.name,
        description=rule.description,
        threshold=rule.threshold,
        tier=rule.tier.value,
        access_level=rule.access_level.value,
        window_days=rule.window_days,
        live_window_start=rule.live_window_start,
        live_window_end=rule.live_window_end,
        timezone=rule.timezone,
        priority=rule.priority,
        is_active=rule.is_active,
        times_triggered=rule.times_triggered,
        last_triggered_at=rule.last_triggered_at,
    )


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_spend_rule(
    request: SpendRuleCreateRequest,
    staff: Principal = Depends(require_staff),
    use_case: CreateSpendRuleUseCase = Depends(CreateSpendRuleUseCase.depends),
) -> SpendRuleResponse:
    rule = await use_case.execute(
        principal=staff,
        venue_id=request.venue_id,
        name=request.name,
        description=request.description,
        threshold=request.threshold,
        tier=request.tier,
        access_level=request.access_level,
        window_days=request.window_days,
        live_window_start=request.live_window_start,
        live_window_end=request.live_window_end,
        timezone=request.timezone,
        priority=request.priority,
    )
    return _rule_response(rule)


@router.get('/venue/{venue_id}')
@Logger.io
async def list_spend_rules(
    venue_id: int,
    active_only: bool = False,
    staff: Principal = Depends(require_staff),
    use_case: ListSpendRulesUseCase = Depends(ListSpendRulesUseCase.depends),
) -> List[SpendRuleResponse]:
    rules = await use_case.execute(principal=staff, venue_id=venue_id, active_only=active_only)
    return [_rule_response(rule) for rule in rules]


@router.patch('/{rule_id}/active')
@Logger.io
async def toggle_spend_rule(
    rule_id: int,
    request: SpendRuleToggleRequest,
    staff: Principal = Depends(require_staff),
    use_case: ToggleSpendRuleUseCase = Depends(ToggleSpendRuleUseCase.depends),
) -> SpendRuleResponse:
    rule = await use_case.execute(principal=staff, rule_id=rule_id, is_active=request.is_active)
    return _rule_response(rule)


@router.patch('/{rule_id}')
@Logger.io
async def update_spend_rule(
    rule_id: int,
    request: SpendRuleUpdateRequest,
    staff: Principal = Depends(require_staff),
    use_case: UpdateSpendRuleUseCase = Depends(UpdateSpendRuleUseCase.depends),
) -> SpendRuleResponse:
    rule = await use_case.execute(
        principal=staff, rule_id=rule_id, changes=request.model_dump(exclude_unset=True)
    )
    return _rule_response(rule)
