"""
单个文件的处理：扫描日期、计算目标时间和文件名、修改或模拟修改、计数

修改时间和重命名是两个独立的子操作，各自得到一个 Outcome。
同一个文件再处理一次时两者都应该是 CORRECT。
"""
from pathlib import Path
from typing import Optional

from ..config import RedateConfig
from .calendar_adjust import (
    adjust_datetime,
    format_datetime,
    format_millis,
    parse_candidate,
    to_millis,
)
from .dst import DstCompensator
from .errors import UnparsableCandidateError
from .events import EventCallback, EventKind, FileEvent, emit
from .fileops import rename_in_place, set_modified_time
from .models import ChangePlan, FileRecord, Outcome, Totals
from .scanner import scan_file
from .selector import select_best


class ChangePlanner:
    """按配置处理文件，结果写入 Totals 并通过回调报告"""

    def __init__(
        self,
        config: RedateConfig,
        totals: Totals,
        on_event: Optional[EventCallback] = None,
        dst: Optional[DstCompensator] = None,
    ):
        self.config = config
        self.totals = totals
        self.on_event = on_event
        self.dst = dst or DstCompensator(config.dst_mode)

    def _emit(self, kind: EventKind, path: Path, text: str, **extra) -> FileEvent:
        return emit(self.on_event, FileEvent(kind, path, f"{path.name} - {text}", **extra))

    def process_record(self, record: FileRecord) -> Optional[ChangePlan]:
        """
        处理一个文件，任何错误都不会抛出到调用者

        返回:
            ChangePlan，如果没有找到日期、读取失败或不需要修改则返回 None
        """
        path = record.path
        try:
            candidates = scan_file(path, self.config.read_limit)
        except OSError as e:
            self._emit(EventKind.NOTICE, path, f"读取失败: {e}", outcome=Outcome.FAILED)
            self.totals.increment("error")
            return None

        for candidate in candidates:
            self._emit(EventKind.DEBUG, path, f"找到日期和时间 {candidate}")

        best = select_best(candidates, self.config.selection_policy)
        if best is None:
            self._emit(EventKind.COMMENT, path, "未找到日期和时间")
            self.totals.increment("no_data")
            return None

        if self.config.dry_run:
            self._emit(EventKind.NOTICE, path, f"使用日期和时间 {best}")
        elif not self.config.apply_timestamp and not self.config.rename_enabled:
            self._emit(EventKind.COMMENT, path, f"找到日期和时间 {best}")
            return None

        try:
            plan = self.plan(record, best)
            self.apply_timestamp(record, plan)
        except UnparsableCandidateError as e:
            self._emit(EventKind.NOTICE, path, str(e), outcome=Outcome.FAILED)
            self.totals.increment("error")
            return None
        except (ValueError, OverflowError, OSError) as e:
            # 文件时间或调整后的时间超出本地时间能表示的范围
            self._emit(EventKind.NOTICE, path, f"日期和时间超出范围: {e}", outcome=Outcome.FAILED)
            self.totals.increment("error")
            return None

        self.apply_rename(record, plan)
        self._count(plan)
        return plan

    def plan(self, record: FileRecord, best: str) -> ChangePlan:
        """根据选中的日期计算目标时间和文件名"""
        adjusted = parse_candidate(best)
        if not self.config.adjustment.is_zero():
            adjusted = adjust_datetime(adjusted, self.config.adjustment)
            self._emit(EventKind.DEBUG, record.path, f"调整日期和时间为 {format_datetime(adjusted)}")

        # 前缀用调整后的本地时间，在夏令时补偿之前计算
        prefix = adjusted.strftime(self.config.rename_format) if self.config.rename_enabled else ""
        return ChangePlan(
            candidate=best,
            adjusted=adjusted,
            target_ms=self.dst.for_storage(to_millis(adjusted)),
            prefix=prefix,
            target_name=prefix + record.name,
        )

    def apply_timestamp(self, record: FileRecord, plan: ChangePlan) -> Outcome:
        if not self.config.apply_timestamp:
            return plan.timestamp

        path = record.path
        new_text = format_datetime(plan.adjusted)
        old_text = format_millis(self.dst.for_display(record.mtime_ms))
        self._emit(EventKind.DEBUG, path, f"文件当前的日期和时间为 {old_text}")
        values = {"old_value": old_text, "new_value": new_text}

        if abs(plan.target_ms - record.mtime_ms) < self.config.tolerance_ms:
            plan.timestamp = Outcome.CORRECT
            self._emit(EventKind.COMMENT, path, "日期和时间已正确", outcome=plan.timestamp, **values)
        elif not record.writable:
            plan.timestamp = Outcome.BLOCKED
            self._emit(EventKind.FAILURE, path, f"只读文件，无法修改日期为 {new_text}",
                       outcome=plan.timestamp, **values)
        elif self.config.dry_run:
            plan.timestamp = Outcome.SIMULATED
            self._emit(EventKind.SUCCESS, path, f"模拟修改日期为 {new_text}，原为 {old_text}",
                       outcome=plan.timestamp, **values)
        else:
            try:
                set_modified_time(path, plan.target_ms)
            except OSError as e:
                plan.timestamp = Outcome.FAILED
                self._emit(EventKind.FAILURE, path, f"修改日期为 {new_text} 失败，原为 {old_text}: {e}",
                           outcome=plan.timestamp, **values)
            else:
                plan.timestamp = Outcome.CHANGED
                self._emit(EventKind.SUCCESS, path, f"已修改日期为 {new_text}，原为 {old_text}",
                           outcome=plan.timestamp, **values)
        return plan.timestamp

    def apply_rename(self, record: FileRecord, plan: ChangePlan) -> Outcome:
        """在文件名前加上日期前缀

        已有的其他日期前缀不会去掉，新前缀直接加在前面。
        """
        if not self.config.rename_enabled:
            return plan.name

        path = record.path
        self._emit(EventKind.DEBUG, path, f"文件名前缀为 <{plan.prefix}>")
        values = {"old_value": record.name, "new_value": plan.target_name}

        if record.name.startswith(plan.prefix):
            plan.name = Outcome.CORRECT
            self._emit(EventKind.COMMENT, path, "文件名前缀已正确", outcome=plan.name, **values)
        elif not record.writable:
            plan.name = Outcome.BLOCKED
            self._emit(EventKind.FAILURE, path, f"只读文件，无法重命名为 {plan.target_name}",
                       outcome=plan.name, **values)
        elif self.config.dry_run:
            plan.name = Outcome.SIMULATED
            self._emit(EventKind.SUCCESS, path, f"模拟重命名为 {plan.target_name}",
                       outcome=plan.name, **values)
        else:
            try:
                rename_in_place(path, plan.target_name)
            except OSError as e:
                plan.name = Outcome.FAILED
                self._emit(EventKind.FAILURE, path, f"重命名为 {plan.target_name} 失败: {e}",
                           outcome=plan.name, **values)
            else:
                plan.name = Outcome.CHANGED
                self._emit(EventKind.SUCCESS, path, f"已重命名为 {plan.target_name}",
                           outcome=plan.name, **values)
        return plan.name

    def _count(self, plan: ChangePlan) -> None:
        """每个文件最多计一次修改；错误单独计数"""
        if plan.changed:
            self.totals.increment("change")
        if plan.correct:
            self.totals.increment("correct")
        if plan.has_error:
            self.totals.increment("error")
