"""Built-in platform profiles: selector chains, delays and URL rules as data.

Adding a platform is a data addition here (or under ``platforms:`` in the
settings YAML), never a new code branch. Patterns are Python regexes applied
with ``re.search`` to the raw URL.
"""

from src.core.config import PlatformProfile, PlatformSelectors, UrlRules
from src.core.schemas import Platform

_LEVER = PlatformProfile(
    platform=Platform.LEVER,
    selectors=PlatformSelectors(
        form=(
            "form#application-form",
            "form.application-form",
            'form[action*="apply"]',
            ".application-page form",
        ),
    ),
    urls=UrlRules(
        domains=("jobs.lever.co", "jobs.eu.lever.co"),
        url_pattern=r"^https://jobs\.(eu\.)?lever\.co/[^/]+/[^/]+",
        search_link_pattern=r"^https://jobs\.(eu\.)?lever\.co/([^/]*)/([^/]*)/?(.*)?$",
        job_id_patterns=(
            r"/([a-f0-9-]{36})/?$",
            r"/([a-f0-9-]{36})/apply/?$",
        ),
        company_patterns=(r"//jobs\.(?:eu\.)?lever\.co/([^/?#]+)",),
    ),
)

_RECRUITEE = PlatformProfile(
    platform=Platform.RECRUITEE,
    selectors=PlatformSelectors(
        form=(
            "form.c-form",
            "form#new_job_application",
            "form.careers-form",
            "form.application-form",
        ),
    ),
    urls=UrlRules(
        domains=("recruitee.com",),
        url_pattern=r"recruitee\.com/(o|career)/",
        search_link_pattern=r"^https://.*\.recruitee\.com/(o|career)/([^/]+)/?.*$",
        job_id_patterns=(r"/([^/]+)$",),
        company_patterns=(r"//(.+?)\.recruitee\.com/",),
    ),
)

_BREEZY = PlatformProfile(
    platform=Platform.BREEZY,
    selectors=PlatformSelectors(
        form=(
            "form.application-form",
            "form#application-form",
            'form[action*="apply"]',
            'form[action*="positions"]',
            ".application-form form",
            "#application form",
        ),
    ),
    urls=UrlRules(
        domains=("breezy.hr", "app.breezy.hr"),
        url_pattern=r"^https://([\w-]+\.breezy\.hr/p/|app\.breezy\.hr/jobs/)([^/]+)",
        search_link_pattern=r"^https://([\w-]+\.breezy\.hr/p/|app\.breezy\.hr/jobs/)([^/]+)/?.*$",
        job_id_patterns=(r"/p/([^/?#]+)", r"/jobs/([^/?#]+)"),
        company_patterns=(
            r"//(.+?)\.breezy\.hr/p/",
            r"//app\.breezy\.hr/jobs/([^/?#]+)",
        ),
        company_excludes=("app",),
    ),
)

_ASHBY = PlatformProfile(
    platform=Platform.ASHBY,
    urls=UrlRules(
        domains=("ashbyhq.com", "jobs.ashbyhq.com"),
        url_pattern=r"^https://(jobs\.ashbyhq\.com/[^/]+/[^/]+|[^/]+\.ashbyhq\.com/[^/]+)",
        search_link_pattern=(
            r"^https://(jobs\.ashbyhq\.com/[^/]+/[^/]+|[^/]+\.ashbyhq\.com/[^/]+)/?.*$"
        ),
        job_id_patterns=(
            r"/([a-f0-9-]{8,})/?$",
            r"/([a-f0-9-]{8,})/application/?$",
        ),
        company_patterns=(
            r"//jobs\.ashbyhq\.com/([^/?#]+)",
            r"//(.+?)\.ashbyhq\.com/",
        ),
        company_excludes=("jobs",),
    ),
)

_GREENHOUSE = PlatformProfile(
    platform=Platform.GREENHOUSE,
    selectors=PlatformSelectors(
        form=(
            "form#application-form",
            "form#application_form",
            'form[action*="greenhouse"]',
        ),
    ),
    urls=UrlRules(
        domains=("greenhouse.io", "boards.greenhouse.io", "job-boards.greenhouse.io"),
        url_pattern=r"^https://(job-boards|boards)\.greenhouse\.io/[^/]+/jobs/[^/]+",
        search_link_pattern=r"^https://(job-boards|boards)\.greenhouse\.io/[^/]+/jobs/[^/]+",
        job_id_patterns=(r"/jobs/(\d+)", r"[?&]gh_jid=(\d+)"),
        company_patterns=(r"//(?:job-boards|boards)\.greenhouse\.io/([^/?#]+)",),
    ),
)

_WORKABLE = PlatformProfile(
    platform=Platform.WORKABLE,
    selectors=PlatformSelectors(
        form=(
            'form[action*="workable"]',
            'form[action*="apply"]',
            "form.application-form",
            "form#application-form",
            "form.whr-form",
        ),
    ),
    urls=UrlRules(
        domains=("workable.com", "apply.workable.com"),
        url_pattern=r"^https://apply\.workable\.com/[^/]+/j/[A-Za-z0-9]+",
        search_link_pattern=r"^https://apply\.workable\.com/[^/]+/j/[A-Za-z0-9]+/?.*$",
        job_id_patterns=(r"/j/([A-Za-z0-9]+)",),
        company_patterns=(r"//apply\.workable\.com/([^/?#]+)",),
    ),
)

_LINKEDIN = PlatformProfile(
    platform=Platform.LINKEDIN,
    selectors=PlatformSelectors(
        apply_button=(
            "button.jobs-apply-button",
            'button[aria-label*="Easy Apply"]',
            'button[aria-label*="apply" i]',
        ),
        job_title=(
            ".job-details-jobs-unified-top-card__job-title",
            ".jobs-unified-top-card__job-title",
            "h1",
        ),
        company_name=(
            ".job-details-jobs-unified-top-card__company-name",
            ".jobs-unified-top-card__company-name",
        ),
        form=(
            ".jobs-easy-apply-modal form",
            ".jobs-easy-apply-content form",
            'div[role="dialog"] form',
        ),
    ),
    urls=UrlRules(
        domains=("linkedin.com", "www.linkedin.com"),
        url_pattern=r"^https://(www\.)?linkedin\.com/jobs/view/\d+",
        search_link_pattern=r"^https://(www\.)?linkedin\.com/jobs/view/\d+/?.*$",
        job_id_patterns=(r"/jobs/view/(\d+)", r"[?&]currentJobId=(\d+)"),
    ),
)

_INDEED = PlatformProfile(
    platform=Platform.INDEED,
    selectors=PlatformSelectors(
        apply_button=(
            "#indeedApplyButton",
            'button[aria-label*="apply" i]',
            'button[class*="apply" i]',
        ),
        form=("#ia-container form", 'form[action*="indeedapply"]'),
    ),
    urls=UrlRules(
        domains=("indeed.com", "smartapply.indeed.com"),
        url_pattern=r"^https://([\w-]+\.)?indeed\.com/(viewjob|rc/clk|m/viewjob)",
        search_link_pattern=r"^https://([\w-]+\.)?indeed\.com/(viewjob|rc/clk)\?.*jk=",
        job_id_patterns=(r"[?&]jk=([a-f0-9]+)", r"[?&]vjk=([a-f0-9]+)"),
    ),
)

_GLASSDOOR = PlatformProfile(
    platform=Platform.GLASSDOOR,
    selectors=PlatformSelectors(
        apply_button=(
            'button[data-test="easyApply"]',
            'button[data-test="applyButton"]',
            'button[class*="apply" i]',
        ),
        form=("#ia-container form", 'form[action*="apply"]'),
    ),
    urls=UrlRules(
        domains=("glassdoor.com", "www.glassdoor.com"),
        url_pattern=r"^https://(www\.)?glassdoor\.[a-z.]+/(job-listing|Job)/",
        search_link_pattern=r"^https://(www\.)?glassdoor\.[a-z.]+/job-listing/.*$",
        job_id_patterns=(r"[?&]jobListingId=(\d+)", r"[?&]jl=(\d+)"),
    ),
)

_WORKDAY = PlatformProfile(
    platform=Platform.WORKDAY,
    selectors=PlatformSelectors(
        apply_button=(
            'a[data-automation-id="adventureButton"]',
            'button[data-automation-id="applyManually"]',
            'a[class*="apply" i]',
        ),
        form=('form[data-automation-id="applyFlowPage"]', 'div[data-automation-id="applyFlowPage"]'),
    ),
    urls=UrlRules(
        domains=("myworkdayjobs.com",),
        url_pattern=r"^https://[\w-]+\.(wd\d+\.)?myworkdayjobs\.com/.+/job/",
        search_link_pattern=r"^https://[\w-]+\.(wd\d+\.)?myworkdayjobs\.com/.+/job/.*$",
        job_id_patterns=(
            r"/job/[^?#]+_([A-Za-z0-9-]+)/?$",
            r"/job/[^?#]+_([A-Za-z0-9-]+)/apply",
        ),
        company_patterns=(r"//([\w-]+)\.(?:wd\d+\.)?myworkdayjobs\.com",),
    ),
)

_WELLFOUND = PlatformProfile(
    platform=Platform.WELLFOUND,
    selectors=PlatformSelectors(
        form=('div[role="dialog"] form', 'form[action*="apply"]'),
    ),
    urls=UrlRules(
        domains=("wellfound.com",),
        url_pattern=r"^https://(www\.)?wellfound\.com/(jobs/\d+|company/[^/]+/jobs/\d+)",
        search_link_pattern=r"^https://(www\.)?wellfound\.com/(jobs|company/[^/]+/jobs)/\d+.*$",
        job_id_patterns=(r"/jobs/(\d+)",),
        company_patterns=(r"//(?:www\.)?wellfound\.com/company/([^/?#]+)",),
    ),
)

_ZIPRECRUITER = PlatformProfile(
    platform=Platform.ZIPRECRUITER,
    selectors=PlatformSelectors(
        apply_button=(
            'button[class*="one_click_apply" i]',
            'button[aria-label*="apply" i]',
            'a[class*="apply" i]',
        ),
    ),
    urls=UrlRules(
        domains=("ziprecruiter.com", "www.ziprecruiter.com"),
        url_pattern=r"^https://(www\.)?ziprecruiter\.com/(c/[^/]+/Job/|jobs/)",
        search_link_pattern=r"^https://(www\.)?ziprecruiter\.com/(c/[^/]+/Job/|jobs/).*$",
        job_id_patterns=(r"[?&]jid=([\w-]+)", r"/jobs/([\w-]+)"),
        company_patterns=(r"/c/([^/?#]+)/Job/",),
    ),
)

BUILTIN_PROFILES: dict[Platform, PlatformProfile] = {
    profile.platform: profile
    for profile in (
        _LINKEDIN,
        _INDEED,
        _RECRUITEE,
        _GLASSDOOR,
        _WORKDAY,
        _LEVER,
        _BREEZY,
        _ASHBY,
        _GREENHOUSE,
        _WORKABLE,
        _WELLFOUND,
        _ZIPRECRUITER,
    )
}


def get_profile(platform: Platform | str) -> PlatformProfile:
    """Return the built-in profile for a platform.

    Raises ValueError for an unknown platform tag.
    """
    return BUILTIN_PROFILES[Platform(platform)]
