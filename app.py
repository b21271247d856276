# app.py
"""
PT Studio Dashboard - Main Entry Point

Version: 1.0.0
"""

import streamlit as st
import base64
from datetime import date, datetime
from utils.auth import AuthManager
from utils.config import config
from utils.db import check_db_connection
from utils.session_store import get_studio_store, reset_studio_store
from utils.studio_performance import (
    AccessControl,
    AIEstimator,
    DEMO_IDENTITIES,
    DietEntry,
    InBodyEntry,
    Member,
    Schedule,
    WorkoutEntry,
    new_id,
    MemberNotFoundError,
    DataValidationError,
    RevenueAggregator,
    StudioMetrics,
    SURVEY_METRICS,
    current_month_key,
    local_today,
    transactions_to_frame,
)
from utils.studio_performance.constants import (
    EQUIPMENT_CATEGORIES,
    HOMEWORK_BODY_PARTS,
    SALES_SOURCE_LABELS,
    SCHEDULE_TYPES,
)
import logging
import pandas as pd

# Configure logging
logging.basicConfig(
    level=config.get_app_setting("LOG_LEVEL", "INFO"),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# ==================== PAGE CONFIGURATION ====================

APP_NAME = "PT Studio Dashboard"
APP_ICON = "🏋️"
APP_VERSION = "1.0.0"
TIMEZONE = config.get_app_setting("TIMEZONE")

st.set_page_config(
    page_title=APP_NAME,
    page_icon=APP_ICON,
    layout="wide",
    initial_sidebar_state="expanded"
)

# ==================== CUSTOM CSS ====================

st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        margin-bottom: 0.5rem;
        color: #1f77b4;
    }

    .sub-header {
        font-size: 1.1rem;
        color: #666;
        margin-bottom: 2rem;
    }

    .footer {
        text-align: center;
        color: #888;
        padding: 1rem;
        margin-top: 3rem;
        border-top: 1px solid #eee;
        font-size: 0.9rem;
    }
</style>
""", unsafe_allow_html=True)

# ==================== INITIALIZATION ====================

auth = AuthManager()

DEMO_LABELS = {
    'admin': "🛡️ 본사 관리자",
    'manager': "🏢 지점장 (김지점)",
    'trainer': "💪 트레이너 (강철우)",
    'member': "🙋 회원 (김민수)",
}

# ==================== HELPER FUNCTIONS ====================

def format_krw(amount) -> str:
    return f"{int(round(amount or 0)):,}원"


def show_login_page():
    """Display the login page"""
    st.markdown(f'<p class="main-header">{APP_ICON} {APP_NAME}</p>', unsafe_allow_html=True)
    st.markdown('<p class="sub-header">트레이너 · 지점 · 본사 성과 대시보드</p>', unsafe_allow_html=True)

    col1, col2, col3 = st.columns([1, 2, 1])

    with col2:
        if config.is_feature_enabled("DEMO_LOGIN"):
            st.markdown("#### 🎭 데모 계정으로 시작")
            for key, identity in DEMO_IDENTITIES.items():
                if st.button(DEMO_LABELS[key], key=f"demo_{key}", use_container_width=True):
                    auth.login(identity)
                    st.rerun()
            st.markdown("---")

        with st.form("profile_form", clear_on_submit=False):
            st.markdown("#### 🔐 프로필 ID로 로그인")
            user_id = st.text_input("User ID", placeholder="u2", key="login_user_id")
            submit = st.form_submit_button("🔑 Login", type="primary", use_container_width=True)

            if submit:
                db_ok, db_error = check_db_connection()
                if not db_ok:
                    st.error(f"⚠️ {db_error}")
                elif not user_id:
                    st.warning("User ID를 입력하세요")
                else:
                    identity = auth.load_identity(user_id.strip())
                    if identity:
                        auth.login(identity)
                        st.rerun()
                    else:
                        st.error("등록된 프로필이 없습니다")


# ==================== DASHBOARDS ====================

def show_admin_dashboard(store, metrics: StudioMetrics, access: AccessControl, month_key: str):
    viewing_branch = st.session_state.get('viewing_branch')
    if viewing_branch in store.branches:
        if st.button("⬅️ 총괄 페이지로 돌아가기"):
            st.session_state.pop('viewing_branch', None)
            st.rerun()
        show_manager_dashboard(store, metrics, access, month_key, branch_name=viewing_branch)
        return

    overview = metrics.overview(month_key)

    st.markdown(f"### 📊 본사 현황 ({month_key})")
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("이번 달 매출", format_krw(overview['revenue']))
    col2.metric("전사 목표", format_krw(overview['target']))
    col3.metric("달성률", f"{overview['rate_percent']:.1f}%")
    col4.metric("평균 만족도", f"{overview['satisfaction']:.1f}")

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("지점", overview['total_branches'])
    col2.metric("지점장", overview['total_managers'])
    col3.metric("트레이너", overview['total_trainers'])
    col4.metric("회원", overview['total_members'])

    revenue = RevenueAggregator(store.transactions)
    months = config.get_app_setting("TRAILING_MONTHS", 6)

    col1, col2 = st.columns(2)
    with col1:
        st.markdown("#### 📈 월별 매출")
        trend_df = revenue.trailing_monthly_frame(months, as_of=local_today(TIMEZONE))
        st.bar_chart(trend_df, x='month_label', y='amount')
    with col2:
        st.markdown("#### 🧭 신규 매출 유입 경로")
        by_source = revenue.revenue_by_source(month_key)
        source_df = pd.DataFrame([
            {'경로': SALES_SOURCE_LABELS[s], '건수': v['count'], '금액': v['amount']}
            for s, v in by_source.items()
        ])
        st.dataframe(source_df, hide_index=True, use_container_width=True)

    st.markdown("#### 🏢 지점별 달성률 (추정 매출)")
    st.caption("지점 매출은 전사 매출을 인원 비율로 나눈 추정치입니다.")
    st.dataframe(
        metrics.branch_summary_frame(month_key=month_key),
        hide_index=True,
        use_container_width=True
    )

    col1, col2 = st.columns([3, 1])
    branch_choice = col1.selectbox("지점 상세 보기", store.branches, key="drilldown_branch")
    if col2.button("🔎 열기", use_container_width=True) and branch_choice:
        st.session_state['viewing_branch'] = branch_choice
        st.rerun()


def show_manager_dashboard(
    store,
    metrics: StudioMetrics,
    access: AccessControl,
    month_key: str,
    branch_name: str = None
):
    branch_name = branch_name or access.own_branch()
    if not branch_name:
        st.warning("배정된 지점이 없습니다.")
        return

    org_revenue = RevenueAggregator(store.transactions).monthly_revenue(month_key)
    branch = metrics.branch_achievement(branch_name, store.staff, org_revenue)

    st.markdown(f"### 🏢 {branch_name} ({month_key})")
    col1, col2, col3 = st.columns(3)
    col1.metric("지점 목표", format_krw(branch.target))
    col2.metric("추정 매출", format_krw(branch.estimated_revenue))
    col3.metric("달성률", f"{branch.rate_percent:.1f}%")

    st.markdown("#### 💪 트레이너별 성과 (추정)")
    rows = metrics.rank_by_achievement(
        metrics.trainer_performance(branch_name, branch.estimated_revenue)
    )
    if rows:
        st.dataframe(
            pd.DataFrame([r.to_dict() for r in rows]),
            hide_index=True,
            use_container_width=True
        )
    else:
        st.info("지점 소속 트레이너가 없습니다.")

    show_pending_equipment(store)
    show_survey_table(access)


def show_trainer_dashboard(store, metrics: StudioMetrics, access: AccessControl, month_key: str):
    staff = store.find_staff(access.identity.id)
    if staff is None:
        st.warning("직원 정보가 없습니다.")
        return

    achievement = metrics.trainer_self_achievement(staff, month_key)

    st.markdown(f"### 💪 {staff.display_name} · {staff.position} ({month_key})")
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("개인 목표", format_krw(achievement.target))
    col2.metric("추정 매출", format_krw(achievement.revenue))
    col3.metric("달성률", f"{achievement.rate_percent:.1f}%")
    col4.metric("만족도", f"{metrics.trainer_satisfaction(staff.id):.1f}")

    members = access.visible_members()
    st.markdown("#### 👥 담당 회원")
    st.dataframe(
        pd.DataFrame([
            {**m.to_dict(), 'remaining_sessions': m.remaining_sessions}
            for m in members
        ]),
        hide_index=True,
        use_container_width=True
    )

    payments = access.filter_dataframe(transactions_to_frame(store.transactions))
    if not payments.empty:
        st.markdown("#### 💳 담당 회원 결제 내역")
        st.dataframe(
            payments[['date', 'member_name', 'type', 'amount', 'session_count']],
            hide_index=True,
            use_container_width=True
        )

    with st.form("renewal_form"):
        st.markdown("#### 🔁 재등록")
        options = {f"{m.name} ({m.id})": m.id for m in members}
        selected = st.selectbox("회원", list(options.keys()))
        amount = st.number_input("결제 금액", min_value=0, step=100_000)
        sessions = st.number_input("추가 세션", min_value=0, step=1)

        if st.form_submit_button("재등록 저장", type="primary") and selected:
            try:
                store.renew_member(options[selected], int(amount), int(sessions), date.today().isoformat())
                st.success("재등록이 저장되었습니다.")
            except (DataValidationError, MemberNotFoundError) as e:
                st.error(str(e))

    with st.form("workout_form"):
        st.markdown("#### 📝 수업 일지")
        options = {f"{m.name} ({m.id})": m for m in members}
        selected = st.selectbox("회원", list(options.keys()), key="workout_member")
        title = st.text_input("제목", value="PT 수업")
        duration = st.number_input("수업 시간(분)", min_value=10, value=50, step=10)
        content = st.text_area("운동 내용")
        machines = st.text_input("사용 기구 (쉼표로 구분)")

        if st.form_submit_button("저장") and selected:
            member = options[selected]
            burned = AIEstimator.from_config().estimate_calories_burned(
                content, int(duration), member.initial_weight
            )
            store.add_workout_entry(WorkoutEntry(
                id=new_id('w'),
                member_id=member.id,
                date=datetime.now().isoformat(timespec='minutes'),
                title=title,
                duration_minutes=int(duration),
                content=content,
                burned_calories=burned,
            ))
            for machine in machines.split(','):
                store.report_equipment(machine)
            st.success(f"저장되었습니다 (소모 칼로리 약 {burned} kcal)")

    col1, col2 = st.columns(2)
    with col1:
        with st.form("register_form"):
            st.markdown("#### ➕ 신규 회원 등록")
            name = st.text_input("이름")
            phone = st.text_input("연락처")
            sessions = st.number_input("등록 세션", min_value=0, step=1, key="new_sessions")
            payment = st.number_input("결제 금액", min_value=0, step=100_000, key="new_payment")
            source = st.selectbox("유입 경로", list(SALES_SOURCE_LABELS), format_func=SALES_SOURCE_LABELS.get)
            weight = st.number_input("초기 체중(kg)", min_value=0.0, step=0.1)

            if st.form_submit_button("등록", type="primary") and name.strip():
                store.register_member(Member(
                    id=new_id('m'),
                    name=name.strip(),
                    trainer_id=staff.id,
                    total_sessions=int(sessions),
                    payment_amount=int(payment),
                    join_date=date.today().isoformat(),
                    phone_number=phone,
                    source=source,
                    initial_weight=weight or None,
                ))
                st.rerun()

    with col2:
        with st.form("schedule_form"):
            st.markdown("#### 📅 수업 예약")
            options = {f"{m.name} ({m.id})": m for m in members}
            selected = st.selectbox("회원", list(options.keys()), key="schedule_member")
            day = st.date_input("날짜")
            start = st.time_input("시작 시간")
            schedule_type = st.selectbox("구분", SCHEDULE_TYPES)

            if st.form_submit_button("예약") and selected:
                member = options[selected]
                store.add_schedule(Schedule(
                    id=new_id('s'),
                    member_id=member.id,
                    member_name=member.name,
                    start_time=datetime.combine(day, start).isoformat(timespec='minutes'),
                    type=schedule_type,
                ))
                st.rerun()

        schedules = access.visible_schedules()
        if schedules:
            st.dataframe(
                pd.DataFrame([s.to_dict() for s in schedules]),
                hide_index=True,
                use_container_width=True
            )

    st.markdown("#### 🥗 회원 식단 피드백")
    for entry in access.visible_diet_entries():
        with st.expander(f"{entry.date[:10]} · {entry.description} ({entry.calories} kcal)"):
            feedback = st.text_input("피드백", value=entry.trainer_feedback, key=f"feedback_{entry.id}")
            col1, col2 = st.columns(2)
            if col1.button("저장", key=f"save_feedback_{entry.id}"):
                store.add_diet_feedback(entry.id, feedback)
                st.rerun()
            if col2.button("🤖 AI 응원 문구", key=f"ai_feedback_{entry.id}"):
                member = store.find_member(entry.member_id)
                with st.spinner("작성 중..."):
                    text = AIEstimator.from_config().generate_encouragement(
                        member.name if member else '회원', entry.description
                    )
                store.add_diet_feedback(entry.id, text)
                st.rerun()

    show_coaching_tools(access, members)

    show_survey_table(access)


def show_member_dashboard(store, access: AccessControl):
    try:
        member = access.visible_members()[0]
    except MemberNotFoundError:
        st.error("회원 정보를 찾을 수 없습니다. 센터에 문의해주세요.")
        return

    st.markdown(f"### 🙋 {member.name}님")
    col1, col2, col3 = st.columns(3)
    col1.metric("잔여 세션", member.remaining_sessions)
    col2.metric("이번 달 수업", member.monthly_session_count)
    col3.metric("목표", member.goal or "-")

    with st.expander("🎯 목표 수정"):
        goal = st.text_input("운동 목표", value=member.goal)
        if st.button("목표 저장") and goal != member.goal:
            store.update_member_goal(member.id, goal)
            st.rerun()

    inbody = access.visible_inbody_entries()
    if inbody:
        st.markdown("#### 📉 체성분 변화")
        st.line_chart(pd.DataFrame([e.to_dict() for e in inbody]), x='date', y=['weight', 'muscle_mass', 'body_fat'])

    sheet = st.file_uploader("인바디 결과지 올리기", type=["jpg", "jpeg", "png"], key="inbody_upload")
    if sheet is not None and st.button("🔍 결과지 읽기"):
        with st.spinner("분석 중..."):
            reading = AIEstimator.from_config().estimate_body_composition(
                base64.b64encode(sheet.getvalue()).decode()
            )
        if reading.weight > 0:
            store.add_inbody_entry(InBodyEntry(
                id=new_id('i'),
                member_id=member.id,
                date=date.today().isoformat(),
                weight=reading.weight,
                muscle_mass=reading.muscle_mass,
                body_fat=reading.body_fat,
                score=reading.score,
            ))
            st.rerun()
        else:
            st.warning("결과지를 읽지 못했습니다. 다시 시도해주세요.")

    st.markdown("#### 🏋️ 수업 일지")
    for workout in access.visible_workout_entries():
        with st.expander(f"{workout.date[:10]} · {workout.title} ({workout.duration_minutes}분)"):
            st.text(workout.content)
            if workout.feedback:
                st.caption(f"💬 {workout.feedback}")
            if workout.next_goal:
                st.caption(f"🎯 {workout.next_goal}")

    st.markdown("#### 🥗 식단 기록")
    for entry in access.visible_diet_entries():
        st.write(f"**{entry.description}** · {entry.calories} kcal")
        if entry.trainer_feedback:
            st.caption(f"💬 {entry.trainer_feedback}")

    photo = st.file_uploader("식단 사진 올리기", type=["jpg", "jpeg", "png"])
    if photo is not None and st.button("🔍 AI 분석 후 저장"):
        with st.spinner("분석 중..."):
            estimate = AIEstimator.from_config().estimate_nutrition(
                base64.b64encode(photo.getvalue()).decode()
            )
        store.add_diet_entry(DietEntry(
            id=new_id('d'),
            member_id=member.id,
            date=datetime.now().isoformat(timespec='minutes'),
            description=estimate.description,
            calories=estimate.calories,
            macros=estimate.macros,
        ))
        st.rerun()

    trainer = store.find_staff(member.trainer_id)
    if trainer:
        with st.form("survey_form"):
            st.markdown(f"#### ⭐ {trainer.display_name} 트레이너 만족도 설문")
            scores = {
                key: st.slider(label, 1, 5, 5, key=f"survey_{key}")
                for key, label in SURVEY_METRICS.items()
            }
            public_comment = st.text_area("트레이너에게 남길 말")
            private_comment = st.text_area("센터에만 전달할 말 (트레이너에게 비공개)")

            if st.form_submit_button("제출", type="primary"):
                store.submit_survey(trainer.id, member, scores, public_comment, private_comment)
                st.success("설문이 제출되었습니다. 감사합니다!")


def show_pending_equipment(store):
    """Manager approval queue for machines trainers logged that are not in the catalog."""
    st.markdown("#### 🏗️ 미등록 기구")
    if not store.pending_equipment:
        st.caption("승인 대기 중인 기구가 없습니다.")
        return

    for name in list(store.pending_equipment):
        col1, col2, col3, col4 = st.columns([3, 2, 1, 1])
        col1.write(f"**{name}**")
        category = col2.selectbox(
            "분류", EQUIPMENT_CATEGORIES, key=f"pending_category_{name}", label_visibility="collapsed"
        )
        if col3.button("승인", key=f"approve_{name}"):
            store.approve_equipment(name, category)
            st.rerun()
        if col4.button("거절", key=f"reject_{name}"):
            store.reject_equipment(name)
            st.rerun()


def show_coaching_tools(access: AccessControl, members):
    """InBody-based coaching brief and solo homework for an assigned member."""
    if not members:
        return

    st.markdown("#### 🧠 AI 코칭 도구")
    options = {f"{m.name} ({m.id})": m for m in members}
    member = options[st.selectbox("회원", list(options.keys()), key="coaching_member")]
    estimator = AIEstimator.from_config()

    tab_plan, tab_homework = st.tabs(["인바디 분석 전략", "개인 숙제"])

    with tab_plan:
        history = sorted(
            (e for e in access.visible_inbody_entries() if e.member_id == member.id),
            key=lambda e: e.date
        )
        if not history:
            st.info("인바디 기록이 없습니다.")
        elif st.button("전략 생성", key="generate_plan"):
            with st.spinner("분석 중..."):
                st.markdown(estimator.generate_workout_plan(member, history[-1]))

    with tab_homework:
        parts = st.multiselect("운동 부위", HOMEWORK_BODY_PARTS, key="homework_parts")
        if st.button("숙제 만들기", key="generate_homework", disabled=not parts):
            workouts = [e for e in access.visible_workout_entries() if e.member_id == member.id]
            with st.spinner("작성 중..."):
                st.code(estimator.generate_homework(member.name, workouts, parts), language=None)


def show_survey_table(access: AccessControl):
    results = access.visible_survey_results()
    st.markdown("#### ⭐ 만족도 설문")
    if not results:
        st.info("설문 결과가 없습니다.")
        return
    columns = ['date', 'member_name', 'rating', 'public_comment']
    if access.can_view_all():
        columns.append('private_comment')
    df = pd.DataFrame([r.to_dict() for r in results])
    st.dataframe(df[columns], hide_index=True, use_container_width=True)


def show_main_app():
    """Display the main application after login"""
    identity = auth.get_identity()
    store = get_studio_store()
    access = AccessControl(identity, store)
    metrics = StudioMetrics(store)

    with st.sidebar:
        st.markdown(f"### 👤 {auth.get_user_display_name()}")

        level = access.get_access_level()
        if level == 'full':
            st.success("🔓 Full Access")
        elif level == 'assigned':
            st.info("👥 Assigned Members")
        else:
            st.warning("👤 Personal Access")

        st.caption(f"Role: {identity.role}")
        month_key = st.text_input("기준 월 (YYYY-MM)", value=current_month_key(timezone=TIMEZONE))
        st.markdown("---")

        if st.button("♻️ 데모 데이터 초기화", use_container_width=True):
            reset_studio_store()
            st.rerun()

        if st.button("🚪 Logout", use_container_width=True):
            auth.logout()
            st.rerun()

    if identity.role == 'admin':
        show_admin_dashboard(store, metrics, access, month_key)
    elif identity.role == 'manager':
        show_manager_dashboard(store, metrics, access, month_key)
    elif identity.role == 'trainer':
        show_trainer_dashboard(store, metrics, access, month_key)
    else:
        show_member_dashboard(store, access)

    st.markdown(f"""
    <div class="footer">
        <strong>{APP_NAME}</strong> v{APP_VERSION}
    </div>
    """, unsafe_allow_html=True)


# ==================== MAIN ====================

def main():
    """Main application entry point"""
    if not auth.check_session():
        show_login_page()
    else:
        show_main_app()


if __name__ == "__main__":
    main()
